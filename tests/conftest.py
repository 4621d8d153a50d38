"""Shared fixtures for oaslint tests."""

import pytest

from oaslint.linter import RuleDescriptor
from oaslint.parser import parse_document

CLEAN_SPEC = """\
openapi: 3.0.3
info:
  title: Orders API
  version: 1.0.0
servers:
  - url: https://api.example.com/v1
paths:
  /orders:
    get:
      parameters:
        - name: X-Request-ID
          in: header
          required: true
          schema:
            type: string
      responses:
        '200':
          description: Order list
          content:
            application/json:
              schema:
                $ref: '#/components/schemas/OrderList'
    post:
      parameters:
        - name: X-Request-ID
          in: header
          schema:
            type: string
      requestBody:
        content:
          application/json:
            schema:
              $ref: '#/components/schemas/Order'
      responses:
        '201':
          description: Created
          content:
            application/json:
              schema:
                $ref: '#/components/schemas/Order'
  /orders/{orderId}:
    parameters:
      - name: orderId
        in: path
        required: true
        schema:
          type: string
      - name: X-Request-ID
        in: header
        schema:
          type: string
    get:
      responses:
        '200':
          description: One order
          content:
            application/json:
              schema:
                $ref: '#/components/schemas/Order'
    delete:
      responses:
        '204':
          description: Deleted
components:
  schemas:
    Order:
      type: object
      properties:
        id:
          type: string
    OrderList:
      type: object
      properties:
        items:
          type: array
          items:
            $ref: '#/components/schemas/Order'
"""

HTTP_SERVER_SPEC = """\
openapi: 3.0.3
info:
  title: Legacy API
  version: 1.0.0
servers:
  - url: http://legacy.example.com
paths: {}
"""


def _make_rule(function, params=None, **fields):
    return RuleDescriptor.model_validate({
        **fields,
        "call": {"function": function, "functionParams": params or {}},
    })


@pytest.fixture
def clean_spec():
    """A document every built-in rule accepts with default parameters."""
    return CLEAN_SPEC


@pytest.fixture
def clean_document():
    return parse_document(CLEAN_SPEC)


@pytest.fixture
def http_server_spec():
    """A document with a single plain-HTTP server."""
    return HTTP_SERVER_SPEC


@pytest.fixture
def make_rule():
    """Factory building a rule descriptor that calls the given function."""
    return _make_rule
