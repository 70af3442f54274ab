"""
Dreamer VM — Execution Engine

Top-level class that pairs a decoded Program with a State and drives
the fetch/step loop.

Execution model:
  1. Fetch the instruction at ``state.pc`` (an instruction index)
  2. Apply its handler to the current state
  3. Report ``(post-step state, instruction)`` to the observer, if any
  4. Continue from the ``pc`` the handler left behind

The engine never auto-increments the program counter. Every ordinary
handler advances it by one; JUMP overwrites it with a popped target.

Handlers check arity, stack room and arithmetic before they touch
anything, so a step that raises leaves the state exactly as it was.

Termination:
  - HALT:  the HALT instruction was stepped
  - END:   pc reached or passed the end of the Program
  - error: a handler raised ExecutionError. The error is re-raised with
           ``.state`` set to the last good state, which is also left in
           ``Machine.state``.

There is no step budget; a program that jumps to itself runs forever.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Optional

from .cpu import alu
from .cpu.decoder import Program
from .cpu.instruction import RESERVED, Instruction, Opcode
from .cpu.state import State
from .errors import ExecutionError, IllegalInstruction, InsufficientArguments

log = logging.getLogger(__name__)

Observer = Callable[[State, Instruction], None]
Handler = Callable[[State, Instruction], None]


class StopReason(Enum):
    HALT = 'HALT'
    END = 'END'


class Machine:
    """Dreamer stack machine.

    Usage:
        machine = Machine(decode(data))
        final = machine.run()
        print(final.display())
    """

    def __init__(self, program: Program, state: Optional[State] = None):
        self.program = program
        self.state = state.copy() if state is not None else State()
        self.stop_reason: Optional[StopReason] = None
        self.steps = 0
        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self, state: State, instruction: Instruction) -> State:
        """Return the state that results from applying ``instruction`` to ``state``.

        ``state`` itself is not modified.
        """
        next_state = state.copy()
        self._apply(next_state, instruction)
        return next_state

    def run(self) -> State:
        """Run silently until HALT, end of program, or an error."""
        return self._run(None)

    def run_observed(self, observer: Observer) -> State:
        """Run like ``run()``, calling ``observer(state, instruction)`` after every step."""
        return self._run(observer)

    def _apply(self, state: State, instruction: Instruction):
        handler = None
        if instruction.opcode not in RESERVED:
            handler = self._dispatch.get(instruction.opcode)
        if handler is None:
            raise IllegalInstruction(
                f"{instruction.mnemonic} has no step implementation",
                instruction=instruction, pc=state.pc)
        handler(state, instruction)

    def _run(self, observer: Optional[Observer]) -> State:
        log.debug("Run start: %d instructions, pc=%d", len(self.program), self.state.pc)
        self.stop_reason = None

        while self.state.pc < len(self.program):
            pc = self.state.pc
            instruction = self.program[pc]

            try:
                self._apply(self.state, instruction)
            except ExecutionError as e:
                e.attach(instruction, pc, self.state.copy())
                log.info("Run aborted after %d steps: %s", self.steps, e)
                raise

            self.steps += 1
            if observer is not None:
                observer(self.state.copy(), instruction)

            if instruction.opcode == Opcode.HALT:
                self.stop_reason = StopReason.HALT
                break
        else:
            self.stop_reason = StopReason.END

        log.debug("Run stop: %s after %d steps, pc=%d",
                  self.stop_reason.value, self.steps, self.state.pc)
        return self.state.copy()

    def reset(self):
        """Back to the default state, keeping the program."""
        self.state = State()
        self.stop_reason = None
        self.steps = 0

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(state, instruction). Everything that can
    # fail is checked or computed first; mutation comes last.

    def _build_dispatch(self) -> Dict[Opcode, Handler]:
        """Opcode → handler. READ, WRITE and JUMPIF have no handler."""
        dispatch: Dict[Opcode, Handler] = {
            Opcode.NOP:   self._op_nop,
            Opcode.HALT:  self._op_halt,
            Opcode.LOAD:  self._op_load,
            Opcode.STORE: self._op_store,
            Opcode.PUSH:  self._op_push,
            Opcode.POP:   self._op_pop,
            Opcode.SET:   self._op_set,
            Opcode.JUMP:  self._op_jump,
            Opcode.NOT:   self._op_not,
        }
        for opcode in alu.BINARY_OPS:
            dispatch[opcode] = self._op_binary
        return dispatch

    @staticmethod
    def _require(state: State, instruction: Instruction):
        if state.stack.depth() < instruction.arity:
            raise InsufficientArguments(
                f"{instruction.mnemonic} needs {instruction.arity}, "
                f"stack holds {state.stack.depth()}")

    # ── Control ──

    def _op_nop(self, state, instr):
        state.pc += 1

    def _op_halt(self, state, instr):
        pass

    def _op_jump(self, state, instr):
        self._require(state, instr)
        state.pc = state.stack.pop()

    # ── Memory ──

    def _op_load(self, state, instr):
        self._require(state, instr)
        addr = state.stack.pop()
        state.stack.push(state.memory.read(addr))
        state.pc += 1

    def _op_store(self, state, instr):
        self._require(state, instr)
        addr = state.stack.pop()
        value = state.stack.pop()
        state.memory.write(addr, value)
        state.pc += 1

    # ── Register / stack ──

    def _op_push(self, state, instr):
        state.stack.push(state.reg)
        state.pc += 1

    def _op_pop(self, state, instr):
        state.reg = state.stack.pop()
        state.pc += 1

    def _op_set(self, state, instr):
        state.reg = instr.value
        state.pc += 1

    # ── ALU ──

    def _op_binary(self, state, instr):
        self._require(state, instr)
        a = state.stack.peek(0)
        b = state.stack.peek(1)
        result = alu.BINARY_OPS[instr.opcode](a, b)
        state.stack.pop()
        state.stack.pop()
        state.stack.push(result)
        state.pc += 1

    def _op_not(self, state, instr):
        self._require(state, instr)
        state.stack.push(alu.not_(state.stack.pop()))
        state.pc += 1


def execute(program: Program, state: Optional[State] = None,
            observer: Optional[Observer] = None) -> State:
    """Run ``program`` from ``state`` (default: power-on) and return the final state."""
    machine = Machine(program, state)
    if observer is None:
        return machine.run()
    return machine.run_observed(observer)
