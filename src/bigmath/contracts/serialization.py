"""
Serialization — JSON-представление значений bigmath

Значения сериализуются как десятичные строки с числом цифр, достаточным
для точного восстановления на их точности, плюс поле precision:

    {"precision": 64, "value": "3.14159265358979323851"}
    {"precision": 64, "components": ["1.0", "2.0", "3.0"]}
    {"precision": 64, "rows": [["1.0", "0.0", "0.0"], ...]}

Кодирование и разбор выбираются по таблицам: тип -> кодировщик,
вид документа -> декодер. Вид документа совпадает с именем его схемы,
и входной документ проверяется валидатором этого вида до разбора.
Также поддерживается чтение IEEE-754 binary64 из бинарного потока.
"""

import json
import struct
from typing import Any, BinaryIO, Callable, Dict

from bigmath.contracts.validators import validate_document
from bigmath.domain.matrix import Matrix3x3
from bigmath.domain.vector import Vec3, Vec6
from bigmath.math.bigfloat import BigFloat

# Байт в IEEE-754 binary64
DOUBLE_SIZE_BYTES = 8

Serializable = BigFloat | Vec3 | Vec6 | Matrix3x3


def _literal(value: BigFloat, prec: int) -> str:
    return value.with_precision(max(prec, value.precision)).to_decimal_string()


def _shared_precision(values) -> int:
    return max(v.precision for v in values)


# =============================================================================
# КОДИРОВЩИКИ
# =============================================================================


def bigfloat_to_dict(value: BigFloat) -> Dict[str, Any]:
    return {"precision": value.precision, "value": value.to_decimal_string()}


def vector_to_dict(vector: Vec3 | Vec6) -> Dict[str, Any]:
    prec = _shared_precision(vector.components())
    return {"precision": prec, "components": [_literal(c, prec) for c in vector.components()]}


def matrix_to_dict(matrix: Matrix3x3) -> Dict[str, Any]:
    prec = _shared_precision(item for row in matrix.rows for item in row)
    return {"precision": prec, "rows": [[_literal(item, prec) for item in row] for row in matrix.rows]}


_ENCODERS: Dict[type, Callable[[Any], Dict[str, Any]]] = {
    BigFloat: bigfloat_to_dict,
    Vec3: vector_to_dict,
    Vec6: vector_to_dict,
    Matrix3x3: matrix_to_dict,
}

# Вид документа -> конструктор из проверенного документа
_DECODERS: Dict[str, Callable[[Dict[str, Any]], Serializable]] = {
    "bigfloat": lambda data: BigFloat(data["value"], data["precision"]),
    "vec3": lambda data: Vec3.from_values(data["components"], data["precision"]),
    "vec6": lambda data: Vec6.from_values(data["components"], data["precision"]),
    "matrix3x3": lambda data: Matrix3x3.from_floats(data["rows"], data["precision"]),
}

DOCUMENT_KINDS = tuple(_DECODERS)


# =============================================================================
# JSON
# =============================================================================


def to_dict(value: Serializable) -> Dict[str, Any]:
    """Сериализовать значение bigmath в dict."""
    encoder = _ENCODERS.get(type(value))
    if encoder is None:
        raise TypeError(f"cannot serialize {type(value).__name__}")
    return encoder(value)


def from_dict(data: Dict[str, Any], kind: str | None = None) -> Serializable:
    """
    Восстановить значение из документа.

    Args:
        data: Разобранный JSON-документ
        kind: Ожидаемый вид ("bigfloat", "vec3", "vec6", "matrix3x3");
            None — определить по ключам документа

    Raises:
        ValueError: Если вид неизвестен или форма документа не распознана
        ValidationError: Если документ не соответствует контракту вида
    """
    if kind is not None and kind not in _DECODERS:
        raise ValueError(f"unknown document kind: {kind!r}")
    kind = validate_document(data, kind)
    return _DECODERS[kind](data)


def dumps(value: Serializable) -> str:
    """Сериализовать значение в JSON-строку."""
    return json.dumps(to_dict(value))


def loads(text: str, kind: str | None = None) -> Serializable:
    """Разобрать JSON-строку, созданную dumps."""
    return from_dict(json.loads(text), kind)


# =============================================================================
# IEEE-754 BINARY64
# =============================================================================


def read_double(stream: BinaryIO, big_endian: bool = True, prec: int | None = 0) -> BigFloat:
    """
    Прочитать 8 байт IEEE-754 binary64 из потока как BigFloat.

    Args:
        stream: Бинарный поток
        big_endian: Порядок байт (True — big-endian)
        prec: Точность результата (0 = по умолчанию)

    Raises:
        EOFError: Если в потоке меньше 8 байт
    """
    data = stream.read(DOUBLE_SIZE_BYTES)
    if len(data) != DOUBLE_SIZE_BYTES:
        raise EOFError(f"expected {DOUBLE_SIZE_BYTES} bytes, got {len(data)}")
    bits = int.from_bytes(data, "big" if big_endian else "little")
    return BigFloat.from_ieee_bits(bits, prec)


def write_double(stream: BinaryIO, value: BigFloat, big_endian: bool = True) -> None:
    """Записать значение в поток как IEEE-754 binary64 (с округлением до double)."""
    stream.write(struct.pack(">d" if big_endian else "<d", value.to_float()))
