"""Community OS: participant directory with agentic search and coffee roulette."""

__version__ = "1.0.0"
