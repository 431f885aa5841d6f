# SPDX-License-Identifier: Apache-2.0
#
# Copyright 2017-2025 - Armijn Hemel

__version__ = '0.1.0'
