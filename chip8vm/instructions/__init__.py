"""Instruction handlers, one module per opcode family."""
