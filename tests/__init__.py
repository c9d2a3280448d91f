"""
RawAgent Test Suite

Unit tests for the router, conversation loop, model clients, tools and
chat service. Model endpoints and HTTP services are faked; tests that
need real API keys are marked `integration` and skipped unless
RUN_INTEGRATION=1.

Run tests with: pytest tests/
"""
