# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


class WirebindError(Exception):
    """Base class for exceptions raised while building a registry or generating code."""
    pass


class InvalidRegistryError(WirebindError):
    """Raised when a registry is ill-formed, no code is generated from it."""
    pass


class DuplicateContainerError(InvalidRegistryError):
    """Raised when two containers are registered with the same name."""
    pass


class DuplicateIdentifierError(InvalidRegistryError):
    """Raised when two container names derive the same code identifier."""
    pass


class DuplicateFieldError(InvalidRegistryError):
    """Raised when a struct has repeated field names or an enum has repeated variant names."""
    pass


class VariantIndexError(InvalidRegistryError):
    """Raised when the variant indexes of an enum are not contiguous from 0."""
    pass


class UnresolvedReferenceError(InvalidRegistryError):
    """Raised when an object type references a container that was not registered."""
    pass


class InvalidNameError(InvalidRegistryError):
    """Raised when a container, field or variant name is not a valid identifier."""
    pass


class SchemaLoadError(WirebindError):
    """Raised when a schema document cannot be parsed into a registry."""
    pass
