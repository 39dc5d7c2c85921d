"""
===========================================
Typed argument values for statement templates.
===========================================

An ArgumentValue holds exactly one of eight variants and is immutable once
built. Templates consume them in order; the specifier decides which
variants it accepts.

Variants:
- NULL: SQL NULL
- BOOL: rendered as 1 / 0
- INT: signed 64-bit integer
- DOUBLE: finite float
- STRING: text, quoted and escaped on output
- RAW_STATEMENT: trusted sub-statement, only emitted through %Q
- LIST: ordered ArgumentValues (%L, %V rows and columns)
- PAIR_LIST: ordered (key, ArgumentValue) bindings (%U, %W, %LO, %LA)

Usage:
    from querykit.arguments import ArgumentValue

    ids = ArgumentValue.list([1, 2, 3])
    where = ArgumentValue.pair("status", "active")("deleted_at", None)
"""

import math
from enum import Enum
from typing import Any, Iterable, Mapping, Tuple, Union

from querykit.exceptions import TypeMismatch, UnsupportedConversion

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ArgumentKind(Enum):
    """Variant tag of an ArgumentValue. The value is the name used in errors."""

    NULL = 'null'
    BOOL = 'bool'
    INT = 'int'
    DOUBLE = 'double'
    STRING = 'string'
    RAW_STATEMENT = 'query'
    LIST = 'list'
    PAIR_LIST = 'object'


SCALAR_KINDS = frozenset({
    ArgumentKind.NULL,
    ArgumentKind.BOOL,
    ArgumentKind.INT,
    ArgumentKind.DOUBLE,
    ArgumentKind.STRING,
})


class ArgumentValue:
    """Tagged union of the values a template argument can hold.

    Build values through the classmethod constructors (or from_python);
    the constructor itself performs no validation.

    Example:
        >>> ArgumentValue.integer(42).to_display_string()
        '42'
        >>> ArgumentValue.string("x").get_int()
        Traceback (most recent call last):
        ...
        querykit.exceptions.TypeMismatch: expected int, value holds string
    """

    __slots__ = ('_kind', '_value')

    def __init__(self, kind: ArgumentKind, value: Any = None):
        self._kind = kind
        self._value = value

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def null(cls) -> 'ArgumentValue':
        return cls(ArgumentKind.NULL)

    @classmethod
    def boolean(cls, value: bool) -> 'ArgumentValue':
        return cls(ArgumentKind.BOOL, bool(value))

    @classmethod
    def integer(cls, value: int) -> 'ArgumentValue':
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"integer() requires an int, got {type(value).__name__}")
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError(f"integer {value} does not fit in 64 bits")
        return cls(ArgumentKind.INT, value)

    @classmethod
    def double(cls, value: float) -> 'ArgumentValue':
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"double {value!r} is not finite")
        return cls(ArgumentKind.DOUBLE, value)

    @classmethod
    def string(cls, value: str) -> 'ArgumentValue':
        if not isinstance(value, str):
            raise TypeError(f"string() requires a str, got {type(value).__name__}")
        return cls(ArgumentKind.STRING, value)

    @classmethod
    def raw(cls, statement) -> 'ArgumentValue':
        """Wrap a trusted Statement for emission through %Q."""
        from querykit.statement import Statement

        if not isinstance(statement, Statement):
            raise TypeError(f"raw() requires a Statement, got {type(statement).__name__}")
        return cls(ArgumentKind.RAW_STATEMENT, statement)

    @classmethod
    def list(cls, items: Iterable[Any] = ()) -> 'ArgumentValue':
        return cls(ArgumentKind.LIST, tuple(cls.from_python(item) for item in items))

    @classmethod
    def pairs(
        cls,
        bindings: Union[Mapping[str, Any], Iterable[Tuple[str, Any]]] = ()
    ) -> 'ArgumentValue':
        """Build a pair list, keeping the order the bindings are given in."""
        if isinstance(bindings, Mapping):
            bindings = bindings.items()
        return cls(ArgumentKind.PAIR_LIST, tuple(_make_pair(k, v) for k, v in bindings))

    @classmethod
    def pair(cls, key: str, value: Any) -> 'ArgumentValue':
        """Start a pair list with one binding; chain more with ``(key, value)``."""
        return cls.pairs([(key, value)])

    @classmethod
    def from_python(cls, obj: Any) -> 'ArgumentValue':
        """Coerce a plain Python value into an ArgumentValue.

        dicts keep their insertion order. Use querykit.dynamic.from_dynamic
        when key order must not depend on how the dict was built.
        """
        from querykit.statement import Statement

        if isinstance(obj, ArgumentValue):
            return obj
        if obj is None:
            return cls.null()
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.double(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, Statement):
            return cls.raw(obj)
        if isinstance(obj, Mapping):
            return cls.pairs(obj)
        if isinstance(obj, (list, tuple)):
            return cls.list(obj)
        raise TypeError(f"cannot use {type(obj).__name__} as a query argument")

    # ------------------------------------------------------------------
    # Pair-list builder
    # ------------------------------------------------------------------

    def with_pair(self, key: str, value: Any) -> 'ArgumentValue':
        """Return a new pair list with ``key = value`` appended."""
        pairs = self.get_pairs()
        return ArgumentValue(ArgumentKind.PAIR_LIST, pairs + (_make_pair(key, value),))

    __call__ = with_pair

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    @property
    def kind(self) -> ArgumentKind:
        return self._kind

    @property
    def type_name(self) -> str:
        return self._kind.value

    def is_null(self) -> bool:
        return self._kind is ArgumentKind.NULL

    def is_bool(self) -> bool:
        return self._kind is ArgumentKind.BOOL

    def is_int(self) -> bool:
        return self._kind is ArgumentKind.INT

    def is_double(self) -> bool:
        return self._kind is ArgumentKind.DOUBLE

    def is_string(self) -> bool:
        return self._kind is ArgumentKind.STRING

    def is_raw_statement(self) -> bool:
        return self._kind is ArgumentKind.RAW_STATEMENT

    def is_list(self) -> bool:
        return self._kind is ArgumentKind.LIST

    def is_pair_list(self) -> bool:
        return self._kind is ArgumentKind.PAIR_LIST

    def is_scalar(self) -> bool:
        return self._kind in SCALAR_KINDS

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def _expect(self, kind: ArgumentKind) -> Any:
        if self._kind is not kind:
            raise TypeMismatch(f"expected {kind.value}, value holds {self.type_name}")
        return self._value

    def get_bool(self) -> bool:
        return self._expect(ArgumentKind.BOOL)

    def get_int(self) -> int:
        return self._expect(ArgumentKind.INT)

    def get_double(self) -> float:
        return self._expect(ArgumentKind.DOUBLE)

    def get_string(self) -> str:
        return self._expect(ArgumentKind.STRING)

    def get_statement(self):
        return self._expect(ArgumentKind.RAW_STATEMENT)

    def get_list(self) -> Tuple['ArgumentValue', ...]:
        return self._expect(ArgumentKind.LIST)

    def get_pairs(self) -> Tuple[Tuple[str, 'ArgumentValue'], ...]:
        return self._expect(ArgumentKind.PAIR_LIST)

    def to_display_string(self) -> str:
        """Textual form of a Bool, Int, Double or String value.

        Raises:
            UnsupportedConversion: For null, list, object and query values
        """
        kind = self._kind
        if kind is ArgumentKind.BOOL:
            return '1' if self._value else '0'
        if kind is ArgumentKind.INT:
            return str(self._value)
        if kind is ArgumentKind.DOUBLE:
            return repr(self._value)
        if kind is ArgumentKind.STRING:
            return self._value
        raise UnsupportedConversion(
            f"Only allowed type conversions are Int, Double, Bool and String, got {self.type_name}"
        )

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, ArgumentValue):
            return NotImplemented
        return self._kind is other._kind and self._value == other._value

    def __hash__(self):
        return hash((self._kind, self._value))

    def __repr__(self):
        if self._kind is ArgumentKind.NULL:
            return 'ArgumentValue.null()'
        return f"ArgumentValue({self._kind.name}, {self._value!r})"


def _make_pair(key: str, value: Any) -> Tuple[str, ArgumentValue]:
    if not isinstance(key, str):
        raise TypeError(f"pair keys must be str, got {type(key).__name__}")
    return key, ArgumentValue.from_python(value)
