"""CHIP-8 instruction handlers grouped by family.

Every handler takes ``(cpu, instruction, keyboard)`` and returns the updated
``CPUState`` together with a control-flow ``Directive``.
"""
