"""
Entity: Folder Slot

Guarda a pasta de documentos de UM cadastro enquanto os uploads
concorrentes daquele cadastro acontecem. O primeiro a provisionar
vence; os demais reutilizam o mesmo id.
"""

import asyncio
from typing import Awaitable, Callable


class FolderSlot:
    """Valor memoizado por cadastro (não é cache global)."""

    def __init__(self):
        self._lock = asyncio.Lock()
        self.folder_id: str | None = None
        self.folder_url: str | None = None

    @property
    def is_set(self) -> bool:
        return self.folder_id is not None

    async def resolve(
        self, provision: Callable[[], Awaitable[tuple[str, str]]]
    ) -> tuple[str, str]:
        """
        Retorna (folder_id, folder_url), chamando `provision` no máximo
        uma vez com sucesso. Se `provision` falhar, o slot continua vazio
        e a exceção sobe para quem chamou.
        """
        if self.folder_id is not None:
            return self.folder_id, self.folder_url

        async with self._lock:
            if self.folder_id is None:
                folder_id, folder_url = await provision()
                self.folder_id, self.folder_url = folder_id, folder_url
        return self.folder_id, self.folder_url
