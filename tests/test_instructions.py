"""Per-instruction semantics, executed against a bare Machine."""

import itertools
import random

import pytest

from chip8vm.decoder import Op, decode
from chip8vm.errors import AddressError, InvalidOpcodeError, StackUnderflowError
from chip8vm.instructions import execute, funcmap

SAMPLES = [0x00, 0x01, 0x0F, 0x10, 0x7F, 0x80, 0xAB, 0xFE, 0xFF]


def step(machine, opcode, rng=None):
    """Execute one opcode as the cycle driver would, after the +2 advance."""
    machine.program_counter += 2
    execute(machine, decode(opcode), rng or random.Random(0))


def test_every_op_has_a_handler():
    assert set(funcmap) == set(Op)


class TestALU:

    @pytest.mark.parametrize("vx, vy", itertools.product(SAMPLES, SAMPLES))
    def test_add_with_carry(self, machine, vx, vy):
        machine.registers[1], machine.registers[2] = vx, vy
        step(machine, 0x8124)
        assert machine.registers[1] == (vx + vy) % 256
        assert machine.registers[0xF] == (1 if vx + vy > 255 else 0)

    @pytest.mark.parametrize("vx, vy", itertools.product(SAMPLES, SAMPLES))
    def test_sub_not_borrow(self, machine, vx, vy):
        machine.registers[1], machine.registers[2] = vx, vy
        step(machine, 0x8125)
        assert machine.registers[1] == (vx - vy) % 256
        assert machine.registers[0xF] == (1 if vx >= vy else 0)

    @pytest.mark.parametrize("vx, vy", itertools.product(SAMPLES, SAMPLES))
    def test_subn_not_borrow(self, machine, vx, vy):
        machine.registers[1], machine.registers[2] = vx, vy
        step(machine, 0x8127)
        assert machine.registers[1] == (vy - vx) % 256
        assert machine.registers[0xF] == (1 if vy >= vx else 0)

    def test_equal_operands_do_not_borrow(self, machine):
        machine.registers[3] = machine.registers[4] = 0x42
        step(machine, 0x8345)
        assert machine.registers[3] == 0
        assert machine.registers[0xF] == 1

    def test_copy_or_and_xor(self, machine):
        v = machine.registers
        v[0], v[1] = 0b1100, 0b1010
        step(machine, 0x8011)
        assert v[0] == 0b1110
        v[0] = 0b1100
        step(machine, 0x8012)
        assert v[0] == 0b1000
        v[0] = 0b1100
        step(machine, 0x8013)
        assert v[0] == 0b0110
        step(machine, 0x8010)
        assert v[0] == v[1] == 0b1010

    def test_logic_ops_leave_vf(self, machine):
        machine.registers[0xF] = 0x55
        step(machine, 0x8011)
        assert machine.registers[0xF] == 0x55

    def test_shift_right(self, machine):
        machine.registers[5] = 0b10000011
        machine.registers[6] = 0xFF
        step(machine, 0x8566)
        assert machine.registers[5] == 0b01000001
        assert machine.registers[0xF] == 1
        # y is ignored
        assert machine.registers[6] == 0xFF
        step(machine, 0x8566)
        step(machine, 0x8566)
        assert machine.registers[5] == 0b00010000
        assert machine.registers[0xF] == 0

    def test_shift_left(self, machine):
        machine.registers[5] = 0b10000001
        step(machine, 0x850E)
        assert machine.registers[5] == 0b00000010
        assert machine.registers[0xF] == 1
        step(machine, 0x850E)
        assert machine.registers[5] == 0b00000100
        assert machine.registers[0xF] == 0

    def test_flag_wins_when_vf_is_destination(self, machine):
        machine.registers[0xF] = 0xFF
        machine.registers[1] = 0x01
        step(machine, 0x8F14)
        assert machine.registers[0xF] == 1


class TestImmediates:

    def test_load_immediate(self, machine):
        step(machine, 0x6A42)
        assert machine.registers[0xA] == 0x42

    def test_add_immediate_wraps_without_flag(self, machine):
        machine.registers[0] = 0xFF
        machine.registers[0xF] = 7
        step(machine, 0x7002)
        assert machine.registers[0] == 0x01
        assert machine.registers[0xF] == 7


class TestSkips:

    @pytest.mark.parametrize("opcode, vx, vy, skipped", [
        (0x3142, 0x42, 0, True),
        (0x3142, 0x41, 0, False),
        (0x4142, 0x42, 0, False),
        (0x4142, 0x41, 0, True),
        (0x5120, 9, 9, True),
        (0x5120, 9, 8, False),
        (0x9120, 9, 9, False),
        (0x9120, 9, 8, True),
    ])
    def test_register_skips(self, machine, opcode, vx, vy, skipped):
        machine.registers[1], machine.registers[2] = vx, vy
        before = bytes(machine.registers)
        step(machine, opcode)
        assert machine.program_counter == (0x204 if skipped else 0x202)
        assert bytes(machine.registers) == before

    def test_skip_if_key_pressed(self, machine):
        machine.registers[3] = 0xE
        step(machine, 0xE39E)
        assert machine.program_counter == 0x202
        machine.set_key(0xE, True)
        step(machine, 0xE39E)
        assert machine.program_counter == 0x206

    def test_skip_if_key_not_pressed(self, machine):
        machine.registers[3] = 0x0
        step(machine, 0xE3A1)
        assert machine.program_counter == 0x204
        machine.set_key(0x0, True)
        step(machine, 0xE3A1)
        assert machine.program_counter == 0x206

    def test_key_index_out_of_range(self, machine):
        machine.registers[3] = 0x10
        with pytest.raises(AddressError) as exc:
            step(machine, 0xE39E)
        assert exc.value.space == "keypad"


class TestControlFlow:

    def test_jump_ignores_registers(self, machine):
        machine.registers[:] = bytes(range(16))
        step(machine, 0x1ABC)
        assert machine.program_counter == 0xABC

    def test_jump_with_offset(self, machine):
        machine.registers[0] = 0x10
        step(machine, 0xB300)
        assert machine.program_counter == 0x310

    def test_call_pushes_next_address(self, machine):
        step(machine, 0x2400)
        assert machine.program_counter == 0x400
        assert machine.stack == [0x202]

    def test_call_then_return(self, machine):
        machine.push(0x250)
        step(machine, 0x2400)
        step(machine, 0x00EE)
        assert machine.program_counter == 0x202
        assert machine.stack_pointer == 1

    def test_return_on_empty_stack(self, machine):
        with pytest.raises(StackUnderflowError):
            step(machine, 0x00EE)

    def test_invalid_opcode_reports_pc(self, machine):
        with pytest.raises(InvalidOpcodeError) as exc:
            step(machine, 0x0123)
        assert exc.value.opcode == 0x0123
        assert exc.value.pc == 0x200


class TestIndexAndMemory:

    def test_load_index(self, machine):
        step(machine, 0xA123)
        assert machine.index_register == 0x123

    def test_add_to_index_is_unmasked(self, machine):
        machine.index_register = 0xFFF
        machine.registers[2] = 0x02
        machine.registers[0xF] = 0
        step(machine, 0xF21E)
        assert machine.index_register == 0x1001
        assert machine.registers[0xF] == 0

    def test_font_address(self, machine):
        machine.registers[4] = 0xA
        step(machine, 0xF429)
        assert machine.index_register == 50

    @pytest.mark.parametrize("value, digits", [
        (0, (0, 0, 0)), (7, (0, 0, 7)), (42, (0, 4, 2)), (254, (2, 5, 4)), (255, (2, 5, 5)),
    ])
    def test_bcd(self, machine, value, digits):
        machine.registers[6] = value
        machine.index_register = 0x300
        step(machine, 0xF633)
        assert tuple(machine.memory[0x300:0x303]) == digits
        assert machine.index_register == 0x300

    def test_bcd_past_memory_end(self, machine):
        machine.index_register = 0xFFE
        with pytest.raises(AddressError):
            step(machine, 0xF033)

    def test_store_registers_inclusive(self, machine):
        machine.registers[:] = bytes(range(1, 17))
        machine.index_register = 0x400
        step(machine, 0xF355)
        assert list(machine.memory[0x400:0x405]) == [1, 2, 3, 4, 0]
        assert machine.index_register == 0x400

    def test_load_registers_inclusive(self, machine):
        machine.memory[0x400:0x404] = b"\x09\x08\x07\x06"
        machine.index_register = 0x400
        step(machine, 0xF265)
        assert list(machine.registers[:4]) == [9, 8, 7, 0]
        assert machine.index_register == 0x400

    def test_store_past_memory_end(self, machine):
        machine.index_register = 0xFFE
        with pytest.raises(AddressError):
            step(machine, 0xF355)
        assert machine.memory[0xFFE] == 0

    def test_load_past_memory_end_leaves_registers(self, machine):
        machine.registers[:4] = b"\x01\x02\x03\x04"
        machine.memory[0xFFE:0x1000] = b"\xAA\xBB"
        machine.index_register = 0xFFE
        with pytest.raises(AddressError):
            step(machine, 0xF365)
        assert list(machine.registers[:4]) == [1, 2, 3, 4]

    def test_store_and_load_all_sixteen_registers(self, machine):
        machine.registers[:] = bytes(range(0x10, 0x20))
        machine.index_register = 0x500
        step(machine, 0xFF55)
        assert bytes(machine.memory[0x500:0x510]) == bytes(range(0x10, 0x20))
        assert machine.memory[0x510] == 0

        machine.memory[0x500:0x510] = bytes(range(0xF0, 0x100))
        step(machine, 0xFF65)
        assert bytes(machine.registers) == bytes(range(0xF0, 0x100))
        assert machine.index_register == 0x500


class TestTimersAndRandom:

    def test_timer_transfers(self, machine):
        machine.registers[1] = 30
        step(machine, 0xF115)
        step(machine, 0xF118)
        assert machine.delay_timer == 30
        assert machine.sound_timer == 30
        machine.delay_timer = 12
        step(machine, 0xF207)
        assert machine.registers[2] == 12

    def test_random_is_masked(self, machine):
        rng = random.Random(99)
        expected = random.Random(99).getrandbits(8) & 0x0F
        step(machine, 0xC50F, rng)
        assert machine.registers[5] == expected

    def test_random_with_zero_mask(self, machine):
        for seed in range(10):
            step(machine, 0xC500, random.Random(seed))
            assert machine.registers[5] == 0


class TestWaitForKey:

    def test_no_key_holds_pc(self, machine):
        step(machine, 0xF30A)
        assert machine.program_counter == 0x200
        assert machine.registers[3] == 0

    def test_key_zero_is_a_valid_key(self, machine):
        machine.registers[3] = 0xAA
        machine.set_key(0x0, True)
        step(machine, 0xF30A)
        assert machine.registers[3] == 0
        assert machine.program_counter == 0x202

    def test_lowest_pressed_key_wins(self, machine):
        machine.set_key(0xC, True)
        machine.set_key(0x5, True)
        step(machine, 0xF30A)
        assert machine.registers[3] == 0x5


class TestDraw:

    def test_clear_screen(self, machine):
        machine.framebuffer[:] = b"\x01" * len(machine.framebuffer)
        step(machine, 0x00E0)
        assert not any(machine.framebuffer)

    def test_draw_sets_pixels(self, machine):
        machine.memory[0x300] = 0b10100000
        machine.index_register = 0x300
        machine.registers[0], machine.registers[1] = 3, 2
        step(machine, 0xD011)
        frame = machine.frame()
        assert frame[2, 3] == 1 and frame[2, 4] == 0 and frame[2, 5] == 1
        assert sum(machine.framebuffer) == 2
        assert machine.registers[0xF] == 0

    def test_double_draw_restores_and_flags(self, machine):
        machine.memory[0x300:0x305] = b"\xF0\x90\x90\x90\xF0"
        machine.index_register = 0x300
        machine.registers[0], machine.registers[1] = 10, 5
        machine.framebuffer[0] = 1
        before = bytes(machine.framebuffer)
        step(machine, 0xD015)
        assert machine.registers[0xF] == 0
        assert bytes(machine.framebuffer) != before
        step(machine, 0xD015)
        assert machine.registers[0xF] == 1
        assert bytes(machine.framebuffer) == before

    def test_flag_cleared_without_collision(self, machine):
        machine.memory[0x300] = 0xFF
        machine.index_register = 0x300
        machine.registers[0xF] = 1
        step(machine, 0xD011)
        assert machine.registers[0xF] == 0

    def test_pixels_wrap_at_right_and_bottom_edges(self, machine):
        machine.memory[0x300:0x302] = b"\xF0\x80"
        machine.index_register = 0x300
        machine.registers[0], machine.registers[1] = 62, 31
        step(machine, 0xD012)
        frame = machine.frame()
        assert [frame[31, c] for c in (62, 63, 0, 1)] == [1, 1, 1, 1]
        assert frame[0, 62] == 1
        assert sum(machine.framebuffer) == 5

    def test_base_coordinates_wrap(self, machine):
        machine.memory[0x300] = 0x80
        machine.index_register = 0x300
        machine.registers[0], machine.registers[1] = 64 + 8, 32 + 4
        step(machine, 0xD011)
        assert machine.frame()[4, 8] == 1

    def test_zero_height_draws_nothing(self, machine):
        machine.memory[0x300] = 0xFF
        machine.index_register = 0x300
        step(machine, 0xD010)
        assert not any(machine.framebuffer)
        assert machine.registers[0xF] == 0

    def test_sprite_past_memory_end(self, machine):
        machine.index_register = 0xFFE
        with pytest.raises(AddressError):
            step(machine, 0xD015)
