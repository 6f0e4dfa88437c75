# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Transfer strategies for fbupload.

Available Strategies:
    direct : DirectStrategy
        Single PUT (raw bytes) or POST (multipart) to /api/resources.
    resumable : ResumableStrategy
        tus 1.0.0 create + single PATCH to /api/tus.

Example:
    from fbupload.transfer import get_strategy

    strategy = get_strategy("resumable")
    outcome = strategy.upload(
        "https://files.example.com", token, Path("app.zip"), "/releases",
        transport=transport, options={},
    )

"""

# Import strategy modules to trigger self-registration
from . import (
    direct,  # noqa: F401
    resumable,  # noqa: F401
)
from .base import TransferStrategy, available_strategies, get_strategy

__all__ = ["TransferStrategy", "available_strategies", "get_strategy"]
