"""Byte-level encoder for a subset of x86-64 and AVX instructions."""

from __future__ import annotations

import struct
from enum import IntEnum

_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1

DEFAULT_CAPACITY = 4096


class Register(IntEnum):
    """General-purpose 64-bit registers with their hardware numbers."""

    RAX = 0
    RCX = 1
    RDX = 2
    RBX = 3
    RSP = 4
    RBP = 5
    RSI = 6
    RDI = 7
    R8 = 8
    R9 = 9
    R10 = 10
    R11 = 11
    R12 = 12
    R13 = 13
    R14 = 14
    R15 = 15


class YmmRegister(IntEnum):
    """256-bit AVX registers."""

    YMM0 = 0
    YMM1 = 1
    YMM2 = 2
    YMM3 = 3
    YMM4 = 4
    YMM5 = 5
    YMM6 = 6
    YMM7 = 7


class AssemblerError(Exception):
    """Raised when an instruction cannot be encoded or does not fit."""


def _rex(dst: int, src: int) -> int:
    """REX.W prefix with REX.R for ``src`` (reg field) and REX.B for ``dst`` (r/m)."""
    rex = 0x48
    if src >= Register.R8:
        rex |= 0x04
    if dst >= Register.R8:
        rex |= 0x01
    return rex


class Assembler:
    """Writes machine code into a fixed-capacity buffer.

    ``offset`` is the number of bytes emitted so far; ``bytes(asm)`` gives
    exactly those bytes.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self.buffer = bytearray(capacity)
        self.offset = 0

    def __bytes__(self) -> bytes:
        return bytes(self.buffer[: self.offset])

    # ------------------------------------------------------------ raw bytes

    def emit8(self, byte: int) -> None:
        """Emit one byte (truncated to 8 bits)."""
        if self.offset >= self.capacity:
            raise AssemblerError("Buffer overflow")
        self.buffer[self.offset] = byte & 0xFF
        self.offset += 1

    def _emit(self, data: bytes) -> None:
        for byte in data:
            self.emit8(byte)

    def emit32(self, value: int) -> None:
        """Emit a 32-bit value, little-endian."""
        self._emit(_U32.pack(value & _MASK32))

    def _emit_modrm_disp32(self, reg: int, base: int, offset: int) -> None:
        self.emit8(0x80 | (reg << 3) | (base & 7))
        if base & 7 == 4:
            # RSP/R12 as base need a SIB byte: no index, base = RSP.
            self.emit8(0x24)
        self.emit32(offset)

    # -------------------------------------------------------- integer ALU

    def mov_imm64(self, dst: int, value: int) -> None:
        """MOV r64, imm64."""
        rex = 0x48
        if dst >= Register.R8:
            rex |= 0x01
        self.emit8(rex)
        self.emit8(0xB8 + (dst & 7))
        self._emit(_U64.pack(value & _MASK64))

    def _reg_reg(self, opcode: int, dst: int, src: int) -> None:
        self.emit8(_rex(dst, src))
        self.emit8(opcode)
        self.emit8(0xC0 | ((src & 7) << 3) | (dst & 7))

    def mov_reg_reg(self, dst: int, src: int) -> None:
        """MOV dst, src."""
        self._reg_reg(0x89, dst, src)

    def add_reg_reg(self, dst: int, src: int) -> None:
        """ADD dst, src."""
        self._reg_reg(0x01, dst, src)

    def add_reg_imm(self, dst: int, imm: int) -> None:
        """ADD r64, imm32; an immediate of 1 is emitted as INC."""
        if imm == 1:
            self.inc_reg(dst)
            return
        rex = 0x48
        if dst >= Register.R8:
            rex |= 0x01
        self.emit8(rex)
        self.emit8(0x81)
        self.emit8(0xC0 | (dst & 7))
        self.emit32(imm)

    def and_reg_reg(self, dst: int, src: int) -> None:
        """AND dst, src."""
        self._reg_reg(0x21, dst, src)

    def sub_reg_reg(self, dst: int, src: int) -> None:
        """SUB dst, src."""
        self._reg_reg(0x29, dst, src)

    def imul_reg_reg(self, dst: int, src: int) -> None:
        """IMUL dst, src (two-operand signed multiply)."""
        rex = 0x48
        if dst >= Register.R8:
            rex |= 0x04
        if src >= Register.R8:
            rex |= 0x01
        self.emit8(rex)
        self.emit8(0x0F)
        self.emit8(0xAF)
        self.emit8(0xC0 | ((dst & 7) << 3) | (src & 7))

    def _inc_dec(self, modrm_base: int, reg: int) -> None:
        rex = 0x48
        if reg >= Register.R8:
            rex |= 0x01
        self.emit8(rex)
        self.emit8(0xFF)
        self.emit8(modrm_base | (reg & 7))

    def inc_reg(self, reg: int) -> None:
        """INC r64."""
        self._inc_dec(0xC0, reg)

    def dec_reg(self, reg: int) -> None:
        """DEC r64."""
        self._inc_dec(0xC8, reg)

    # --------------------------------------------------------------- stack

    def push(self, src: int) -> None:
        """PUSH r64."""
        if src >= Register.R8:
            self.emit8(0x41)
            self.emit8(0x50 + (src & 7))
        else:
            self.emit8(0x50 + src)

    def pop(self, dst: int) -> None:
        """POP r64."""
        if dst >= Register.R8:
            self.emit8(0x41)
            self.emit8(0x58 + (dst & 7))
        else:
            self.emit8(0x58 + dst)

    def call_reg(self, src: int) -> None:
        """CALL r64; only RAX through RDI are supported."""
        if src > Register.RDI:
            raise AssemblerError("Extended registers not yet supported in Call")
        self.emit8(0xFF)
        self.emit8(0xD0 + src)

    # -------------------------------------------------------------- memory

    def mov_reg_mem(self, dst: int, base: int, offset: int) -> None:
        """MOV dst, [base + disp32]."""
        self.emit8(0x48)
        self.emit8(0x8B)
        self._emit_modrm_disp32(dst, base, offset)

    def mov_mem_reg(self, base: int, offset: int, src: int) -> None:
        """MOV [base + disp32], src."""
        self.emit8(0x48)
        self.emit8(0x89)
        self._emit_modrm_disp32(src, base, offset)

    # ------------------------------------------------------------ compares

    def cmp_reg_imm(self, dst: int, imm: int) -> None:
        """CMP r64, imm32."""
        self.emit8(0x48)
        self.emit8(0x81)
        self.emit8(0xF8 + dst)
        self.emit32(imm)

    def cmp_reg_reg(self, dst: int, src: int) -> None:
        """CMP dst, src."""
        self._reg_reg(0x39, dst, src)

    # --------------------------------------------------------------- jumps

    def jmp(self, offset: int) -> None:
        """JMP rel32."""
        self.emit8(0xE9)
        self.emit32(offset)

    def _jcc(self, condition: int, offset: int) -> None:
        self.emit8(0x0F)
        self.emit8(condition)
        self.emit32(offset)

    def je(self, offset: int) -> None:
        """JE rel32."""
        self._jcc(0x84, offset)

    def jne(self, offset: int) -> None:
        """JNE rel32."""
        self._jcc(0x85, offset)

    def jae(self, offset: int) -> None:
        """JAE rel32 (unsigned >=)."""
        self._jcc(0x83, offset)

    def jge(self, offset: int) -> None:
        """JGE rel32 (signed >=)."""
        self._jcc(0x8D, offset)

    def jl(self, offset: int) -> None:
        """JL rel32 (signed <)."""
        self._jcc(0x8C, offset)

    def patch32(self, offset: int, value: int) -> None:
        """Overwrite four bytes at ``offset`` with a little-endian value."""
        if offset < 0 or offset + 4 > self.capacity:
            raise AssemblerError(f"patch at {offset} lies outside the buffer")
        _U32.pack_into(self.buffer, offset, value & _MASK32)

    def ret(self) -> None:
        """RET."""
        self.emit8(0xC3)

    # ----------------------------------------------------------------- AVX

    def _vex2(self, vvvv: int, length: int, pp: int) -> None:
        self.emit8(0xC5)
        self.emit8(0x80 | ((~vvvv & 0xF) << 3) | (length << 2) | pp)

    def _vex3(
        self, r: int, x: int, b: int, mmmmm: int, w: int, vvvv: int, length: int, pp: int
    ) -> None:
        self.emit8(0xC4)
        self.emit8(((~r & 1) << 7) | ((~x & 1) << 6) | ((~b & 1) << 5) | (mmmmm & 0x1F))
        self.emit8(((w & 1) << 7) | ((~vvvv & 0xF) << 3) | ((length & 1) << 2) | (pp & 3))

    def _vex_ymm_op(self, opcode: int, dst: int, src1: int, src2: int) -> None:
        self._vex2(src1, 1, 1)
        self.emit8(opcode)
        self.emit8(0xC0 | (dst << 3) | src2)

    def vxorpd(self, dst: int, src1: int, src2: int) -> None:
        """VXORPD ymm, ymm, ymm."""
        self._vex_ymm_op(0x57, dst, src1, src2)

    def vpxor(self, dst: int, src1: int, src2: int) -> None:
        """VPXOR ymm, ymm, ymm."""
        self._vex_ymm_op(0xEF, dst, src1, src2)

    def vpaddd(self, dst: int, src1: int, src2: int) -> None:
        """VPADDD ymm, ymm, ymm (eight packed 32-bit integers)."""
        self._vex_ymm_op(0xFE, dst, src1, src2)

    def vaddpd(self, dst: int, src1: int, src2: int) -> None:
        """VADDPD ymm, ymm, ymm (four packed doubles)."""
        self._vex_ymm_op(0x58, dst, src1, src2)

    def avx_hsum_int(self, src: int) -> None:
        """Sum the eight 32-bit integers of a YMM register into EAX."""
        # VEXTRACTI128 xmm1, ymm, 1
        self._vex3(1, 1, 1, 0x03, 0, YmmRegister.YMM0, 1, 1)
        self.emit8(0x39)
        self.emit8(0xC1 | (src << 3))
        self.emit8(0x01)
        # VPADDD xmm0, xmm0, xmm1
        self._vex2(YmmRegister.YMM0, 0, 1)
        self.emit8(0xFE)
        self.emit8(0xC1)
        # VPHADDD xmm0, xmm0, xmm0 twice
        for _ in range(2):
            self._vex3(1, 1, 1, 0x02, 0, YmmRegister.YMM0, 0, 1)
            self.emit8(0x02)
            self.emit8(0xC0)
        # VMOVD eax, xmm0
        self._vex2(YmmRegister.YMM0, 0, 1)
        self.emit8(0x7E)
        self.emit8(0xC0)

    def avx_hsum_double(self, src: int) -> None:
        """Sum the four doubles of a YMM register into the low lane of XMM0."""
        # VEXTRACTF128 xmm1, ymm, 1
        self._vex3(1, 1, 1, 0x03, 0, YmmRegister.YMM0, 1, 1)
        self.emit8(0x19)
        self.emit8(0xC1 | (src << 3))
        self.emit8(0x01)
        # VADDPD xmm0, xmm0, xmm1
        self._vex2(YmmRegister.YMM0, 0, 1)
        self.emit8(0x58)
        self.emit8(0xC1)
        # VHADDPD xmm0, xmm0, xmm0
        self._vex2(YmmRegister.YMM0, 0, 1)
        self.emit8(0x7C)
        self.emit8(0xC0)