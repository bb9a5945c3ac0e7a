# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Configuration errors."""


class ConfigurationError(ValueError):
    """A pipeline configuration violates an invariant and cannot be built."""
