"""End-to-end UI test harness for the GeroWallet browser extension."""

__version__ = "1.0.0"
