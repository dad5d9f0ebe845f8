from __future__ import annotations

import re
from typing import Literal, Optional

Presbytery = Literal["PANA", "PNAN"]

CPF_PATTERN = re.compile(r"^\d{3}\.\d{3}\.\d{3}-\d{2}$")
CNPJ_PATTERN = re.compile(r"^\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}$")
POSTAL_CODE_PATTERN = re.compile(r"^\d{5}-\d{3}$")
STATE_PATTERN = re.compile(r"^[A-Z]{2}$")


def _check(pattern: re.Pattern[str], value: Optional[str], message: str) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    if not pattern.match(cleaned):
        raise ValueError(message)
    return cleaned


def normalize_cpf(value: Optional[str]) -> Optional[str]:
    return _check(CPF_PATTERN, value, "CPF must use the format 123.456.789-00")


def normalize_cnpj(value: Optional[str]) -> Optional[str]:
    return _check(CNPJ_PATTERN, value, "CNPJ must use the format 12.345.678/0001-90")


def normalize_postal_code(value: Optional[str]) -> Optional[str]:
    return _check(POSTAL_CODE_PATTERN, value, "Postal code (CEP) must use the format 12345-678")


def normalize_state(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return _check(STATE_PATTERN, value.upper(), "State must be a two-letter UF code")
