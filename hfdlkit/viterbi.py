"""Soft-decision Viterbi decoder for the K=7, rate 1/2 convolutional code."""

from __future__ import annotations

from typing import Sequence

V27POLYA = 0x6D
V27POLYB = 0x4F

_TAIL = 6  # encoder memory: number of flush bits following the data


def parity(x: int) -> int:
    """Return the parity (0 or 1) of the low 32 bits of ``x``."""
    return bin(x & 0xFFFFFFFF).count("1") & 1


def _branch_table(poly: int) -> list[int]:
    inverted = poly < 0
    mask = abs(poly)
    return [255 if inverted ^ parity((2 * state) & mask) else 0 for state in range(32)]


class Viterbi27:
    """Viterbi decoder for the r=1/2 K=7 code.

    Symbols are soft bits in the range 0..255, where 0 is a confident 0 and
    255 a confident 1. ``length`` is the maximum number of data bits per
    frame (the six tail bits are added on top); ``None`` means unlimited.
    A negative polynomial denotes an inverted output.
    """

    def __init__(
        self,
        length: int | None = None,
        polys: tuple[int, int] = (V27POLYA, V27POLYB),
        starting_state: int = 0,
    ) -> None:
        if length is not None and length < 0:
            raise ValueError("length must be non-negative")
        self.length = length
        self._branch0 = _branch_table(polys[0])
        self._branch1 = _branch_table(polys[1])
        self._metrics: list[int] = []
        self._decisions: list[int] = []
        self.reset(starting_state)

    def reset(self, starting_state: int = 0) -> None:
        """Prepare the decoder for a new frame starting in ``starting_state``."""
        self._metrics = [63] * 64
        self._metrics[starting_state & 63] = 0
        self._decisions = []

    def update(self, symbols: Sequence[int]) -> None:
        """Feed pairs of soft symbols; each pair decodes one bit."""
        if len(symbols) % 2 != 0:
            raise ValueError("symbols must come in pairs")
        if any(not 0 <= s <= 255 for s in symbols):
            raise ValueError("soft symbols must be in range 0..255")
        nbits = len(symbols) // 2
        if self.length is not None and len(self._decisions) + nbits > self.length + _TAIL:
            raise ValueError("too many symbols for the decoder length")
        bt0, bt1 = self._branch0, self._branch1
        it = iter(symbols)
        for sym0, sym1 in zip(it, it):
            old = self._metrics
            new = [0] * 64
            decision = 0
            for i in range(32):
                metric = (bt0[i] ^ sym0) + (bt1[i] ^ sym1)
                m0 = old[i] + metric
                m1 = old[i + 32] + (510 - metric)
                if m0 > m1:
                    new[2 * i] = m1
                    decision |= 1 << (2 * i)
                else:
                    new[2 * i] = m0
                delta = metric + metric - 510
                m0 -= delta
                m1 += delta
                if m0 > m1:
                    new[2 * i + 1] = m1
                    decision |= 1 << (2 * i + 1)
                else:
                    new[2 * i + 1] = m0
            self._decisions.append(decision)
            self._metrics = new

    def chainback(self, nbits: int, endstate: int = 0) -> bytes:
        """Trace back the survivor path and return ``nbits`` decoded bits, MSB first."""
        if nbits < 0:
            raise ValueError("nbits must be non-negative")
        if nbits + _TAIL > len(self._decisions):
            raise ValueError(
                f"not enough symbols decoded: need {nbits + _TAIL} bits, "
                f"have {len(self._decisions)}"
            )
        decisions = self._decisions
        state = (endstate % 64) << 2
        data = bytearray((nbits + 7) // 8)
        for n in reversed(range(nbits)):
            k = (decisions[n + _TAIL] >> (state >> 2)) & 1
            state = (state >> 1) | (k << 7)
            data[n >> 3] = state
        return bytes(data)