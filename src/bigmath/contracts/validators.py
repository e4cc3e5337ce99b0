"""
JSON Schema контракты сериализованных значений bigmath

Каждый вид документа описан своей схемой (Draft 2020-12) в каталоге
contracts/schema/ пакета:

    "bigfloat"   {"precision", "value"}
    "vec3"       {"precision", "components"[3]}
    "vec6"       {"precision", "components"[6]}
    "matrix3x3"  {"precision", "rows"[3][3]}

SchemaRegistry компилирует один Draft202012Validator на вид при первом
обращении и переиспользует его. detect_kind определяет вид документа по
его ключам, validate_document проверяет документ против контракта вида.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Схема проходит meta-валидацию до построения валидатора
2. Валидатор вида строится один раз на реестр
3. Документ проверяется до разбора значений
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping

import jsonschema
from jsonschema import Draft202012Validator

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).parent / "schema"

# Длина массива components -> вид вектора
_VECTOR_KINDS = {3: "vec3", 6: "vec6"}


# =============================================================================
# РЕЕСТР СХЕМ
# =============================================================================


class SchemaRegistry:
    """
    Кеш скомпилированных валидаторов по виду документа.

    Examples:
        >>> registry = SchemaRegistry()
        >>> registry.is_valid("vec3", {"precision": 64, "components": ["1", "2", "3"]})
        True
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or SCHEMA_DIR
        if not self._schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")
        self._validators: Dict[str, Draft202012Validator] = {}

    def _load(self, kind: str) -> Dict[str, Any]:
        schema_path = self._schema_dir / f"{kind}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {kind}.json: {e.message}") from e
        return schema

    def validator(self, kind: str) -> Draft202012Validator:
        """
        Валидатор вида kind (строится при первом обращении).

        Raises:
            FileNotFoundError: Если схемы вида нет в каталоге
            ValueError: Если файл не является валидной JSON Schema
        """
        cached = self._validators.get(kind)
        if cached is None:
            cached = Draft202012Validator(self._load(kind))
            self._validators[kind] = cached
            logger.debug("compiled schema validator: kind=%s", kind)
        return cached

    def schema(self, kind: str) -> Dict[str, Any]:
        return self.validator(kind).schema

    def validate(self, kind: str, data: Mapping[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: Если документ не соответствует контракту
        """
        self.validator(kind).validate(data)

    def is_valid(self, kind: str, data: Mapping[str, Any]) -> bool:
        return self.validator(kind).is_valid(data)

    def errors(self, kind: str, data: Mapping[str, Any]) -> List[jsonschema.ValidationError]:
        """Все нарушения контракта, упорядоченные по пути в документе."""
        return sorted(self.validator(kind).iter_errors(data), key=lambda e: e.json_path)


_REGISTRY = SchemaRegistry()


def get_registry() -> SchemaRegistry:
    """Общий реестр пакета (валидаторы схем из contracts/schema/)."""
    return _REGISTRY


# =============================================================================
# ВИД ДОКУМЕНТА
# =============================================================================


def detect_kind(data: Any) -> str:
    """
    Определить вид документа по его ключам.

    - "value" -> "bigfloat"
    - "rows" -> "matrix3x3"
    - "components" из 6 элементов -> "vec6", иначе "vec3"

    Raises:
        ValueError: Если документ не объект или его форма не распознана
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"document must be a JSON object, got {type(data).__name__}")
    if "value" in data:
        return "bigfloat"
    if "rows" in data:
        return "matrix3x3"
    components = data.get("components")
    if isinstance(components, list):
        # Неверная длина отклоняется схемой vec3
        return _VECTOR_KINDS.get(len(components), "vec3")
    raise ValueError(f"unrecognized document keys: {sorted(data)}")


def validate_document(data: Any, kind: str | None = None) -> str:
    """
    Проверить документ против контракта и вернуть его вид.

    Args:
        data: Разобранный JSON-документ
        kind: Ожидаемый вид; None — определить по ключам

    Raises:
        ValueError: Если вид не удаётся определить
        jsonschema.ValidationError: Если документ нарушает контракт
    """
    if kind is None:
        kind = detect_kind(data)
    _REGISTRY.validate(kind, data)
    return kind
