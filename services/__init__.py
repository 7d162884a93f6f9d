"""
Service layer for AWS operations.

This module provides abstraction over the SSM Parameter Store and Lambda
APIs, separating naming conventions and handlers from infrastructure calls.
"""
