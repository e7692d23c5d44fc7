"""
UUID7 Pydantic type.

uuid_utils.UUID has no Pydantic integration, so request/response schemas use
this subclass: JSON input must be a UUID string, Python input may be a UUID
or a string, and serialization always yields the canonical string form.
"""

from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
import uuid_utils
from uuid_utils import UUID


def new_id() -> str:
    """Time-ordered id for holds, sessions, bookings and escalations."""
    return str(uuid_utils.uuid7())


class UtilsUUID7(UUID):
    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        def _to_uuid(value: Any) -> UUID:
            if isinstance(value, UUID):
                return value
            try:
                return UUID(str(value))
            except ValueError as e:
                raise ValueError(f'Invalid UUID: {value}') from e

        return core_schema.json_or_python_schema(
            json_schema=core_schema.chain_schema(
                [
                    core_schema.str_schema(),
                    core_schema.no_info_plain_validator_function(_to_uuid),
                ]
            ),
            python_schema=core_schema.union_schema(
                [
                    core_schema.is_instance_schema(UUID),
                    core_schema.chain_schema(
                        [
                            core_schema.str_schema(),
                            core_schema.no_info_plain_validator_function(_to_uuid),
                        ]
                    ),
                ]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                str,
                when_used='always',
                return_schema=core_schema.str_schema(),
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        # Expanding the core schema yields validator internals OpenAPI cannot use
        return {'type': 'string', 'format': 'uuid'}
