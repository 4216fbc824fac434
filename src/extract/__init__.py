"""
Extract Layer - Pure I/O to the Patients API

This layer handles all external data fetching with no business logic.
- No imports from transform or load layers
- Returns raw patient records exactly as the upstream sent them
- Handles pagination, rate limiting, bounded retries and cancellation
"""
