"""
Exceptions levées lors de l'assemblage d'un EPUB.
"""

from typing import List


class EpubAssemblyError(Exception):
    """Classe de base des erreurs d'assemblage."""


class InputStreamError(EpubAssemblyError):
    """Un flux fourni par l'appelant a échoué pendant la copie."""

    def __init__(self, entry_name: str, cause: Exception):
        super().__init__(f"Failed to read input for {entry_name}: {cause}")
        self.entry_name = entry_name


class ArchiveError(EpubAssemblyError):
    """L'archive de sortie n'a pas pu créer ou finaliser une entrée."""


class ValidationError(EpubAssemblyError):
    """Le manifeste viole le contrat de l'appelant."""

    def __init__(self, problems: List[str]):
        super().__init__("Invalid manifest: " + "; ".join(problems))
        self.problems = problems
