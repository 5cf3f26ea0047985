"""
Consulta de CEP no ViaCEP — usada pelo front para pré-preencher o endereço.
"""

import logging

import httpx

from intake.core.errors import PostalCodeLookupError
from intake.infrastructure.rules.formatters import only_digits

logger = logging.getLogger(__name__)


class ViaCepClient:

    def __init__(self, base_url: str = "https://viacep.com.br/ws", timeout_seconds: float = 10.0,
                 client: httpx.AsyncClient | None = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._client = client

    async def lookup(self, cep: str) -> dict | None:
        """
        Returns:
            Endereço mapeado, ou None se o CEP não existe.

        Raises:
            PostalCodeLookupError: ViaCEP fora do ar ou resposta inválida.
        """
        digits = only_digits(cep)
        url = f"{self._base_url}/{digits}/json/"
        try:
            if self._client is not None:
                response = await self._client.get(url, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"ViaCEP lookup failed for {digits}: {e}")
            raise PostalCodeLookupError(f"ViaCEP lookup failed: {e}") from e

        if payload.get("erro"):
            return None

        return {
            "cep": payload.get("cep", ""),
            "street": payload.get("logradouro", ""),
            "complement": payload.get("complemento", ""),
            "neighborhood": payload.get("bairro", ""),
            "city": payload.get("localidade", ""),
            "state": payload.get("uf", ""),
            "ibge": payload.get("ibge", ""),
            "ddd": payload.get("ddd", ""),
        }
