# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Command line tools for cyclewatch."""
