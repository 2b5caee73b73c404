"""Kernel: domain model, ports, events and cross-cutting utilities.

Nothing in the kernel performs I/O; drivers implement the ports.
"""
