"""
TaggedValue — Тег + значение одной моделью

Immutable Pydantic модель: тег и полезная нагрузка всегда путешествуют вместе,
поэтому значение не может быть прочитано в чужой кодировке.

Валидация приводит полезную нагрузку к канонической форме тега:
- BOOL        → bool
- целые теги  → int в диапазоне тега (wrap-around)
- float-теги  → float, округлённый до точности тега
- BIG_DOUBLE  → BigDouble

NONE отклоняется (ValidationError).
"""

import math
from typing import Any, Final

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from src.core.contracts.validators import validate_tagged_value
from src.core.domain.codec import decode_payload, encode_payload
from src.core.domain.narrowing import Payload, narrow_from_double, narrow_payload
from src.core.domain.numeric_tag import NumericTag, byte_size, require_supported
from src.core.math.big_double import BigDouble

# Токены неконечных float в JSON-представлении
_JSON_FLOAT_TOKENS: Final[dict[str, float]] = {
    "NaN": math.nan,
    "Inf": math.inf,
    "-Inf": -math.inf,
}


class TaggedValue(BaseModel):
    """
    Значение в одной из числовых кодировок.

    Создание:
        TaggedValue.create(NumericTag.INT32, 5)
        TaggedValue.from_double(NumericTag.INT8, 300.7)    → value = 44
        TaggedValue.from_storage(NumericTag.FLOAT64, buf, 8)
    """

    tag: NumericTag = Field(..., description="Кодировка значения")
    value: Any = Field(..., description="Полезная нагрузка в канонической форме тега")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("tag")
    @classmethod
    def validate_tag(cls, v: NumericTag) -> NumericTag:
        """NONE не является кодировкой значения."""
        return require_supported(v, "TaggedValue")

    @field_validator("value")
    @classmethod
    def canonicalize_value(cls, v: Any, info: ValidationInfo) -> Payload:
        """Приведение полезной нагрузки к кодировке тега."""
        tag = info.data.get("tag")
        if tag is None:
            # Тег уже не прошёл валидацию, ошибка будет в отчёте
            return v
        try:
            return narrow_payload(tag, v)
        except TypeError as e:
            raise ValueError(str(e)) from e

    # -------------------------------------------------------------------------
    # Конструкторы
    # -------------------------------------------------------------------------

    @classmethod
    def create(cls, tag: NumericTag, value: Payload) -> "TaggedValue":
        """Из типизированного значения (int, float, bool или BigDouble)."""
        return cls(tag=tag, value=value)

    @classmethod
    def from_double(cls, tag: NumericTag, value: float) -> "TaggedValue":
        """
        Из native double с усекающим приведением к тегу.

        Examples:
            >>> TaggedValue.from_double(NumericTag.INT16, -3.9).value
            -3
            >>> TaggedValue.from_double(NumericTag.BOOL, 0.25).value
            True
        """
        return cls(tag=tag, value=narrow_from_double(tag, value))

    @classmethod
    def from_storage(
        cls, tag: NumericTag, buffer: bytes | bytearray | memoryview, offset: int = 0
    ) -> "TaggedValue":
        """
        Чтение из байтового буфера по смещению.

        Raises:
            StorageError: Если значение не помещается в буфер
        """
        return cls(tag=tag, value=decode_payload(tag, buffer, offset))

    # -------------------------------------------------------------------------
    # Конверсии
    # -------------------------------------------------------------------------

    @property
    def byte_size(self) -> int:
        return byte_size(self.tag)

    def to_bytes(self) -> bytes:
        """Байты значения (host-native порядок байт)."""
        return encode_payload(self.tag, self.value)

    def to_double(self) -> float:
        if isinstance(self.value, BigDouble):
            return self.value.to_double()
        return float(self.value)

    def with_value(self, value: Payload) -> "TaggedValue":
        """Новое значение с тем же тегом."""
        return TaggedValue(tag=self.tag, value=value)

    def to_json_dict(self) -> dict[str, Any]:
        """
        JSON-совместимое представление.

        BigDouble → {"mantissa", "exponent"}; неконечные float → "NaN", "Inf", "-Inf".
        """
        value = self.value
        if isinstance(value, BigDouble):
            payload: Any = value.to_dict()
            if value.is_nan:
                payload["mantissa"] = _float_to_json(value.mantissa)
        elif isinstance(value, float):
            payload = _float_to_json(value)
        else:
            payload = value
        return {"tag": self.tag.value, "value": payload}

    @classmethod
    def from_json_dict(cls, data: dict[str, Any]) -> "TaggedValue":
        """
        Восстановление из to_json_dict() с проверкой контракта tagged_value.

        Raises:
            jsonschema.ValidationError: Если данные не соответствуют контракту
        """
        validate_tagged_value(data)

        tag = NumericTag(data["tag"])
        raw = data["value"]

        if tag is NumericTag.BIG_DOUBLE:
            value: Payload = BigDouble(_float_from_json(raw["mantissa"]), raw["exponent"])
        elif isinstance(raw, str):
            value = _float_from_json(raw)
        else:
            value = raw

        return cls(tag=tag, value=value)


def _float_to_json(value: float) -> float | str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Inf" if value > 0 else "-Inf"
    return value


def _float_from_json(value: float | str) -> float:
    if isinstance(value, str):
        return _JSON_FLOAT_TOKENS[value]
    return float(value)
