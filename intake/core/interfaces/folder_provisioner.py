"""
Contract: Folder Provisioner

Get-or-create da pasta de um cadastro no drive compartilhado.
"""

from abc import ABC, abstractmethod


class IFolderProvisioner(ABC):
    """
    Port: Folder Provisioner

    Busca por nome exato antes de criar. Corridas entre chamadas
    concorrentes são toleradas; quem chama deve memoizar o id
    (ver FolderSlot) para os demais arquivos do mesmo cadastro.
    """

    @abstractmethod
    async def get_or_create(self, folder_name: str, parent_id: str) -> str:
        """
        Returns:
            id da pasta existente ou recém-criada.

        Raises:
            FolderProvisioningError
        """
        ...

    @abstractmethod
    def folder_url(self, folder_id: str) -> str:
        ...
