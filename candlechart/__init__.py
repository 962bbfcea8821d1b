"""
Candle Chart

OHLCV candles, SMA/EMA/RSI indicator series and Fibonacci levels over HTTP.
"""

__version__ = "0.1.0"
