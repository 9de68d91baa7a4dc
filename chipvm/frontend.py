"""pygame window frontend for the CHIP-8 engine.

Controls: the 16 keys map to 1234/QWER/ASDF/ZXCV, ESC quits, P toggles step
mode, N steps once while in step mode, M dumps memory, O lists the program,
0/9/8/7 select the debugger mode.
"""

import argparse
import time

import pygame

from chipvm.cpu import Quirks, TimerMode
from chipvm.debugger import DebugMode, Debugger
from chipvm.engine import create_cpu, engine_config, is_sound_active, load_program, logger, reset
from chipvm.errors import Chip8Error
from chipvm.keyboard import Keypad
from chipvm.logging import EmulatorLogger
from chipvm.rendering import create_color_scheme, render_if_dirty

KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

DEBUG_MODE_KEYS = {
    pygame.K_0: DebugMode.DISABLED,
    pygame.K_9: DebugMode.STEP,
    pygame.K_8: DebugMode.CPU_INFO,
    pygame.K_7: DebugMode.OPCODE_INFO,
}


def run_emulator(
    rom_filename: str,
    scale: int = 10,
    ticks_per_frame: int = 10,
    color_scheme: str = "pink",
    timer_mode: TimerMode = TimerMode.PER_TICK,
    quirks: Quirks = Quirks(),
    log_level: str = "INFO",
):
    """Open a window and run a ROM until the window is closed."""
    log = EmulatorLogger("Frontend", log_level=log_level)
    logger.set_level(log_level)
    debugger = Debugger(logger=EmulatorLogger("Debugger", log_level=log_level))

    with open(rom_filename, "rb") as f:
        program = f.read()

    cpu = create_cpu(quirks=quirks, timer_mode=timer_mode)
    log.log_boot(engine_config(cpu))
    try:
        cpu = load_program(cpu, program)
    except Chip8Error as e:
        log.log_error(e)
        return

    pygame.init()
    screen = pygame.display.set_mode((64 * scale, 32 * scale))
    pygame.display.set_caption(f"chipvm - {rom_filename}")
    clock = pygame.time.Clock()
    keypad = Keypad()
    _, off_color = create_color_scheme(color_scheme)
    screen.fill(off_color)

    running = True
    last_time = time.time()
    try:
        while running:
            clock.tick(60)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in KEY_MAP:
                        keypad.press(KEY_MAP[event.key])
                    elif event.key in DEBUG_MODE_KEYS:
                        debugger.set_mode(DEBUG_MODE_KEYS[event.key])
                    elif event.key == pygame.K_p:
                        debugger.toggle_step()
                    elif event.key == pygame.K_n and debugger.mode is DebugMode.STEP:
                        cpu = debugger.step(cpu, keypad)
                    elif event.key == pygame.K_m:
                        debugger.print_memory(cpu)
                    elif event.key == pygame.K_o:
                        debugger.print_program(program)
                    elif event.key == pygame.K_BACKSPACE:
                        cpu = load_program(reset(cpu), program)
                        log.info("Reset")
                elif event.type == pygame.KEYUP and event.key in KEY_MAP:
                    keypad.release(KEY_MAP[event.key])

            now = time.time()
            elapsed, last_time = now - last_time, now

            if debugger.mode is not DebugMode.STEP:
                for i in range(ticks_per_frame):
                    cpu = debugger.step(cpu, keypad, elapsed if i == 0 else 0.0)

            cpu, frame = render_if_dirty(cpu, scale=scale, color_scheme=color_scheme)
            if frame is not None:
                surface = pygame.surfarray.make_surface(frame.swapaxes(0, 1))
                screen.blit(surface, (0, 0))
            pygame.display.set_caption(
                f"chipvm - {rom_filename}{' [BEEP]' if is_sound_active(cpu) else ''}"
            )
            pygame.display.flip()
    except Chip8Error as e:
        log.log_error(e)
        debugger.print_registers(cpu)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chipvm", description="Run a CHIP-8 ROM.")
    parser.add_argument("rom", help="Path to a raw CHIP-8 ROM file")
    parser.add_argument("--scale", type=int, default=10, help="Pixel scale factor")
    parser.add_argument("--ticks-per-frame", type=int, default=10, help="Instructions executed per 60 Hz frame")
    parser.add_argument("--color-scheme", default="pink", help="Color scheme name")
    parser.add_argument("--clock-timers", action="store_true",
                        help="Count timers down at 60 Hz wall time instead of once per tick")
    parser.add_argument("--shift-uses-vy", action="store_true", help="8XY6/8XYE shift VY into VX")
    parser.add_argument("--jump-uses-vx", action="store_true", help="BXNN jumps to VX + NNN")
    parser.add_argument("--load-store-increments-i", action="store_true", help="FX55/FX65 advance I")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    run_emulator(
        args.rom,
        scale=args.scale,
        ticks_per_frame=args.ticks_per_frame,
        color_scheme=args.color_scheme,
        timer_mode=TimerMode.CLOCK if args.clock_timers else TimerMode.PER_TICK,
        quirks=Quirks(
            shift_uses_vy=args.shift_uses_vy,
            jump_uses_vx=args.jump_uses_vx,
            load_store_increments_i=args.load_store_increments_i,
        ),
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
