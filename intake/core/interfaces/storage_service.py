"""
Contract: Document Storage

Onde ficam os arquivos enviados no cadastro (S3 ou Google Drive).
Um único provider é escolhido na inicialização do processo.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from intake.core.entities.folder_slot import FolderSlot
from intake.core.entities.submission import DocumentType, SubmissionContext


@dataclass
class StoredReference:
    """Referência a um arquivo armazenado. Só um dos formatos é preenchido."""
    provider: str                        # "s3" | "drive"
    url: str
    key: str | None = None               # S3
    file_id: str | None = None           # Drive
    view_url: str | None = None
    download_url: str | None = None
    folder_id: str | None = None
    folder_url: str | None = None


class IDocumentStorage(ABC):
    """
    Port: Document Storage

    Implementações: object storage (S3) e drive compartilhado.
    """

    name: str = ""
    supports_folders: bool = False

    @abstractmethod
    async def store(
        self,
        data: bytes,
        file_name: str,
        content_type: str,
        context: SubmissionContext,
        document_type: DocumentType,
        folder_slot: FolderSlot | None = None,
    ) -> StoredReference:
        """
        Armazena um arquivo.

        Args:
            data: Conteúdo em bytes.
            file_name: Nome original do arquivo.
            content_type: MIME type declarado.
            context: Dados do cadastro para nomear chave/pasta.
            document_type: Tipo do documento.
            folder_slot: Pasta compartilhada pelos uploads do mesmo cadastro.

        Returns:
            StoredReference com a localização do arquivo.

        Raises:
            UploadError: o provider falhou.
        """
        ...

    async def ensure_folder(
        self, context: SubmissionContext, folder_slot: FolderSlot | None = None
    ) -> str | None:
        """URL da pasta do cadastro, criando se preciso. Sem pastas → None."""
        return None
