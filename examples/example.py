import sys
import time

from chipvm import Keypad, create_cpu, load_rom
from chipvm.rendering import display_to_rgb, create_color_scheme, save_frame
from chipvm.runner import run

if __name__ == "__main__":
    if len(sys.argv) != 2:
        sys.exit("usage: python examples/example.py ROM")
    rom = sys.argv[1]

    cpu = load_rom(create_cpu(), rom)

    start = time.time()
    cpu = run(cpu, Keypad(), num_ticks=2000, progress=True)
    print("Execution time (s):", time.time() - start)

    on_color, off_color = create_color_scheme("amber")
    save_frame(display_to_rgb(cpu.display, scale=8, on_color=on_color, off_color=off_color), "frame.png")
    print("Final PC:", hex(int(cpu.pc)), "halted:", cpu.halted)
