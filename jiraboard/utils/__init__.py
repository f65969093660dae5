"""Error types, token and password helpers, time and decimal parsing."""