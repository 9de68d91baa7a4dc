"""
Play a CHIP-8 ROM in a pygame window.

    python main.py roms/pong.ch8 --scale 12 --color-scheme amber
"""

from chipvm.frontend import main

if __name__ == "__main__":
    main()
