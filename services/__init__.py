"""
Services Package

Runtime pieces of a sampling run:
- feed_session: One WebSocket connection per exchange
- price_cache: Observations per requested pair and the aggregator
- sampling_loop: The state machine multiplexing feeds and the timer
"""
