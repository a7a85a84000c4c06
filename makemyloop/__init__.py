"""Make My Loop: closed walking/running loops from an address and a target."""

__version__ = "0.1.0"
