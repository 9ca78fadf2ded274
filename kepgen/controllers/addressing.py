"""Address allocation for exported tags.

Every data type has its own counter; the address a tag receives depends
only on how many tags of the same type were allocated before it:

- String:  S001, S002, ...
- Integer: D0000, D0001, ...
- Boolean: D0000.0 .. D0000.15, D0001.0, ... (16 bits per word)
"""

from typing import Iterable, Iterator, Tuple, Union

from kepgen.config.constants import (
    BOOLEAN_ADDRESS_FORMAT,
    BOOLEAN_BITS_PER_WORD,
    INTEGER_ADDRESS_FORMAT,
    INTEGER_ADDRESS_START,
    STRING_ADDRESS_FORMAT,
    STRING_ADDRESS_START,
)
from kepgen.models import TagDataType, TagRecord

from .validators import parse_data_type


class AddressAllocator:
    """Stateful address generator, one instance per export."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self._string_index = STRING_ADDRESS_START
        self._integer_index = INTEGER_ADDRESS_START
        self._boolean_word = 0
        self._boolean_bit = 0

    def next(self, data_type: Union[TagDataType, str, int]) -> str:
        """Return the next address for ``data_type`` and advance its counter."""
        data_type = parse_data_type(data_type)
        if data_type is TagDataType.INTEGER:
            address = INTEGER_ADDRESS_FORMAT.format(index=self._integer_index)
            self._integer_index += 1
            return address
        if data_type is TagDataType.BOOLEAN:
            return self._next_boolean()
        address = STRING_ADDRESS_FORMAT.format(index=self._string_index)
        self._string_index += 1
        return address

    def _next_boolean(self) -> str:
        address = BOOLEAN_ADDRESS_FORMAT.format(word=self._boolean_word, bit=self._boolean_bit)
        self._boolean_bit += 1
        if self._boolean_bit >= BOOLEAN_BITS_PER_WORD:
            self._boolean_bit = 0
            self._boolean_word += 1
        return address

    def allocate(self, records: Iterable[TagRecord]) -> Iterator[Tuple[TagRecord, str]]:
        """Yield ``(record, address)`` for each record, in order."""
        for record in records:
            yield record, self.next(record.data_type)


__all__ = ["AddressAllocator"]
