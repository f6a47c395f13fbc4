# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

# Main application package initialization file
from pathlib import Path

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent
