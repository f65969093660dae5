"""API response envelopes and validation error formatting."""