from __future__ import annotations

from typing import Callable, TypeVar

from .errors import Truncated

T = TypeVar("T")


class ByteCursor:
    """Читатель буфера только вперёд, с проверкой границ.

    Все многобайтовые целые протокола - big-endian.
    """

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        if isinstance(data, bytes) or (isinstance(data, memoryview) and data.readonly):
            self._data = memoryview(data)
        else:
            # изменяемый буфер копируется
            self._data = memoryview(bytes(data))
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def rest(self) -> bytes:
        return self._data[self._pos:].tobytes()

    def require(self, n: int, field: str) -> None:
        if n < 0 or n > self.remaining:
            raise Truncated(field, self._pos, n, self.remaining)

    def peek_exact(self, n: int, field: str = "bytes") -> bytes:
        self.require(n, field)
        return self._data[self._pos:self._pos + n].tobytes()

    def take_exact(self, n: int, field: str = "bytes") -> bytes:
        chunk = self.peek_exact(n, field)
        self._pos += n
        return chunk

    def _uint(self, size: int, field: str) -> int:
        return int.from_bytes(self.take_exact(size, field), "big")

    def u8(self, field: str = "u8") -> int:
        return self._uint(1, field)

    def u16(self, field: str = "u16") -> int:
        return self._uint(2, field)

    def u32(self, field: str = "u32") -> int:
        return self._uint(4, field)

    def u64(self, field: str = "u64") -> int:
        return self._uint(8, field)

    def i32(self, field: str = "i32") -> int:
        return int.from_bytes(self.take_exact(4, field), "big", signed=True)


def read_counted(
    cursor: ByteCursor,
    item: Callable[[ByteCursor], T],
    field: str,
    item_size: int | None = None,
) -> tuple[T, ...]:
    """Группа с префиксом длины: u8 count, затем count элементов в порядке провода.

    Если размер элемента известен заранее, нехватка байт обнаруживается
    до чтения первого элемента.
    """
    count = cursor.u8(f"{field}.count")
    if item_size is not None:
        cursor.require(count * item_size, field)
    return tuple(item(cursor) for _ in range(count))
