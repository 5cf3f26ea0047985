"""
Route: GET /api/cep/{code} — passthrough para o ViaCEP.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from intake.api.dependencies import AppContainer, get_container
from intake.api.schemas.responses import AddressLookupResponse, AddressResponse
from intake.core.errors import PostalCodeLookupError
from intake.infrastructure.rules.formatters import only_digits

router = APIRouter()


@router.get("/cep/{code}", response_model=AddressLookupResponse)
async def lookup_cep(code: str, container: AppContainer = Depends(get_container)):
    digits = only_digits(code)
    if len(digits) != 8:
        return JSONResponse(status_code=400, content={"success": False, "message": "CEP inválido"})

    try:
        address = await container.cep_client.lookup(digits)
    except PostalCodeLookupError:
        return JSONResponse(
            status_code=502,
            content={"success": False, "message": "Serviço de CEP indisponível"},
        )

    if address is None:
        return JSONResponse(status_code=404, content={"success": False, "message": "CEP não encontrado"})

    return AddressLookupResponse(data=AddressResponse(**address))
