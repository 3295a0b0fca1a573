"""
JSON Schema контракты сериализованных числовых значений

Схемы (contracts/schema/, Draft 2020-12):
- big_double.json   — запись {"mantissa", "exponent"} в нормализованной форме
- tagged_value.json — {"tag", "value"}; допустимое value определяется тегом

Неконечные float передаются строковыми токенами "NaN", "Inf", "-Inf".

Валидаторы компилируются один раз на схему и переиспользуются.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, List

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

logger = logging.getLogger(__name__)

# Корень проекта — 4 уровня вверх от этого файла
SCHEMA_DIR = Path(__file__).resolve().parents[3] / "contracts" / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Чтение и meta-валидация схем из каталога контрактов.

    Загруженные схемы кэшируются по имени.
    """

    def __init__(self, schema_dir: Path = SCHEMA_DIR):
        if not schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {schema_dir}")
        self._schema_dir = schema_dir
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def available(self) -> List[str]:
        """Имена схем в каталоге (без расширения)."""
        return sorted(path.stem for path in self._schema_dir.glob("*.json"))

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени.

        Args:
            schema_name: Имя файла без расширения ('big_double', 'tagged_value')

        Raises:
            FileNotFoundError: Схемы нет в каталоге
            ValueError: Файл не является корректной JSON Schema
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.is_file():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_path.name}: {e.message}") from e

        self._schemas[schema_name] = schema
        logger.debug("contract_schema_loaded", extra={"schema": schema_name, "path": str(schema_path)})
        return schema


_SCHEMA_LOADER = SchemaLoader()


@lru_cache(maxsize=None)
def _compiled(schema_name: str) -> Draft202012Validator:
    return Draft202012Validator(_SCHEMA_LOADER.load_schema(schema_name))


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Проверка данных против одной схемы контракта."""

    schema_name: str

    def __init__(self, schema_name: str = ""):
        if schema_name:
            self.schema_name = schema_name
        self.validator = _compiled(self.schema_name)

    @property
    def schema(self) -> Dict[str, Any]:
        return self.validator.schema

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Первое найденное нарушение контракта
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        return self.validator.iter_errors(data)

    def describe_errors(self, data: Dict[str, Any]) -> List[str]:
        """
        Все нарушения в виде "<json path>: <сообщение>".

        Examples:
            >>> BigDoubleValidator().describe_errors({"mantissa": 1.0})
            ["$: 'exponent' is a required property"]
        """
        errors = sorted(self.iter_errors(data), key=lambda e: e.json_path)
        return [f"{error.json_path}: {error.message}" for error in errors]


class BigDoubleValidator(ContractValidator):
    schema_name = "big_double"


class TaggedValueValidator(ContractValidator):
    """
    Контракт tagged_value: bool для "bool", целое в диапазоне для целых тегов,
    число или токен для float-тегов, запись big_double для "big_double".
    """

    schema_name = "tagged_value"


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_big_double(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: Если запись не соответствует контракту big_double
    """
    BigDoubleValidator().validate(data)


def validate_tagged_value(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: Если данные не соответствуют контракту tagged_value
    """
    TaggedValueValidator().validate(data)
