"""Fatal interpreter failures.

Every error here ends the current emulation session: the host stops calling
``CPU.cycle`` and reports the message.
"""


class Chip8Error(Exception):
    pass


class InvalidOpcodeError(Chip8Error):
    def __init__(self, opcode, pc):
        self.opcode = opcode
        self.pc = pc
        super().__init__("Invalid opcode %04X at 0x%03X" % (opcode, pc))


class StackError(Chip8Error):
    def __init__(self, message, depth):
        self.depth = depth
        super().__init__("%s (stack depth %d)" % (message, depth))


class StackOverflowError(StackError):
    def __init__(self, depth):
        super().__init__("Stack overflow on CALL", depth)


class StackUnderflowError(StackError):
    def __init__(self, depth):
        super().__init__("Stack underflow on RET", depth)


class AddressError(Chip8Error):
    """An operand or the index register pointed outside memory or the keypad."""

    def __init__(self, space, address):
        self.space = space
        self.address = address
        super().__init__("%s address out of range: 0x%X" % (space.capitalize(), address))
