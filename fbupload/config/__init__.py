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

"""Server profile loading for fbupload.

Profiles are YAML files layered over built-in defaults, with CLI overrides
applied last. See loader for the merge rules.

Public API:

- load_profile: Load and merge the effective server profile
- DEFAULT_PROFILE: Built-in defaults

Example:
    from fbupload.config import load_profile

    profile = load_profile()
    print(profile["server"]["transfer"])  # "direct"

"""

from .loader import DEFAULT_PROFILE, load_profile

__all__ = ["DEFAULT_PROFILE", "load_profile"]
