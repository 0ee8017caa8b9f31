from __future__ import annotations

from pydantic import ValidationError

from cepweather.errors import ZipcodeError
from cepweather.models.schemas import ZipcodeRequest

ZIPCODE_LENGTH = 8


def is_valid_zipcode(zipcode: str) -> bool:
    return len(zipcode) == ZIPCODE_LENGTH


def parse_zipcode(body: bytes) -> str:
    """Decode a `{"cep": "..."}` request body and return the validated zipcode.

    Raises ZipcodeError with a message suitable for a 400 response.
    """

    try:
        payload = ZipcodeRequest.validate_json(body)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise ZipcodeError(f"invalid request body: {first['msg']}") from exc

    zipcode = payload.get("cep")
    if zipcode is None:
        raise ZipcodeError("missing zipcode")

    if not is_valid_zipcode(zipcode):
        raise ZipcodeError("invalid zipcode")

    return zipcode
