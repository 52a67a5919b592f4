"""Cooperative, tick-based async runtime with timers, channels, combinators and keypad events."""