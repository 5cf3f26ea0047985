"""
Contracts: CRM Sync e Notification Dispatcher

Efeitos colaterais best-effort disparados depois do commit.
"""

from abc import ABC, abstractmethod

from intake.core.entities.submission import Submission


class ICrmSync(ABC):
    """
    Port: CRM Sync

    Nunca lança exceção para fora: falhas são logadas e engolidas.
    """

    @abstractmethod
    async def push(self, submission: Submission) -> None:
        ...


class INotifier(ABC):
    """
    Port: Notification Dispatcher

    O booleano é informativo; ninguém toma decisão com ele.
    """

    @abstractmethod
    async def notify(self, submission: Submission, documents_folder_url: str | None = None) -> bool:
        """
        Envia o resumo do cadastro para os destinos configurados.

        Returns:
            True se pelo menos um destino recebeu.
        """
        ...
