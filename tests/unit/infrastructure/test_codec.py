"""Tests for JsonCodec."""

import json
from dataclasses import dataclass, field
from datetime import date

import pytest

from cachedgql import DecodeError, GraphqlResponse, JsonCodec


@dataclass
class Price:
    amount: float
    currency: str


@dataclass
class Product:
    sku: str
    product_name: str | None = None
    price: Price | None = None
    tags: list[str] = field(default_factory=list)


@dataclass
class Query:
    products: list[Product]
    total_count: int


@dataclass
class Error:
    message: str
    path: list[str] | None = None


class TestJsonCodec:
    """Tests for JsonCodec."""

    @pytest.fixture
    def codec(self) -> JsonCodec:
        """Create a codec for testing."""
        return JsonCodec()

    def test_decode_raw(self, codec: JsonCodec) -> None:
        """Test decoding without target types keeps the JSON values."""
        response = codec.decode('{"data": {"text": "t"}, "errors": [{"message": "e"}]}')

        assert response.data == {"text": "t"}
        assert response.errors == [{"message": "e"}]

    def test_decode_bytes(self, codec: JsonCodec) -> None:
        """Test byte bodies are decoded with the codec encoding."""
        response = codec.decode('{"data": {"name": "café"}}'.encode())

        assert response.data == {"name": "café"}
        assert response.errors is None

    def test_decode_dataclasses(self, codec: JsonCodec) -> None:
        """Test nested dataclasses are built from their type hints."""
        body = json.dumps(
            {
                "data": {
                    "products": [
                        {
                            "sku": "a",
                            "productName": "Shirt",
                            "price": {"amount": 9.5, "currency": "EUR"},
                            "unknown": True,
                        },
                        {"sku": "b", "tags": ["new"]},
                    ],
                    "total_count": 2,
                },
                "errors": [{"message": "partial"}],
            }
        )

        response = codec.decode(body, Query, Error)

        assert response.data == Query(
            products=[
                Product("a", "Shirt", Price(9.5, "EUR")),
                Product("b", tags=["new"]),
            ],
            total_count=2,
        )
        assert response.errors == [Error("partial")]

    def test_missing_required_member_is_none(self, codec: JsonCodec) -> None:
        """Test an absent member without default becomes None."""
        response = codec.decode('{"data": {"amount": 1}}', Price)

        assert response.data == Price(amount=1, currency=None)  # type: ignore[arg-type]

    @pytest.mark.parametrize("body", ["not json", "[1, 2]", b"\xff\xfe"])
    def test_decode_malformed(self, codec: JsonCodec, body: str | bytes) -> None:
        """Test bodies that are not a JSON object raise DecodeError."""
        with pytest.raises(DecodeError):
            codec.decode(body)

    def test_decode_type_mismatch(self, codec: JsonCodec) -> None:
        """Test values that cannot be converted raise DecodeError."""
        with pytest.raises(DecodeError):
            codec.decode('{"data": ["not", "an", "object"]}', Query)

    def test_encode_variables(self, codec: JsonCodec) -> None:
        """Test dataclasses and dates are encoded."""
        encoded = codec.encode(
            {"filter": Price(1.0, "EUR"), "since": date(2024, 1, 31)}
        )

        assert json.loads(encoded) == {
            "filter": {"amount": 1.0, "currency": "EUR"},
            "since": "2024-01-31",
        }

    def test_encode_unsupported(self, codec: JsonCodec) -> None:
        """Test values without a JSON form raise TypeError."""
        with pytest.raises(TypeError):
            codec.encode({"value": object()})

    def test_encode_response_compact(self, codec: JsonCodec) -> None:
        """Test responses are encoded compactly, without absent members."""
        response = GraphqlResponse(data={"product": {"sku": "a", "name": "Café"}})

        assert (
            codec.encode_response(response)
            == '{"data":{"product":{"sku":"a","name":"Café"}}}'
        )

    def test_encode_response_dataclasses(self, codec: JsonCodec) -> None:
        """Test typed responses encode None members away."""
        response = GraphqlResponse(
            data=Product("a", price=Price(2.0, "USD")), errors=[Error("oops")]
        )

        assert json.loads(codec.encode_response(response)) == {
            "data": {
                "sku": "a",
                "price": {"amount": 2.0, "currency": "USD"},
                "tags": [],
            },
            "errors": [{"message": "oops"}],
        }

    def test_encode_response_wire_names(self, codec: JsonCodec) -> None:
        """Test nested typed data is encoded as the endpoint sent it."""
        response = GraphqlResponse(
            data=Query(products=[Product("a", product_name="Shirt")], total_count=1)
        )

        assert codec.encode_response(response) == (
            '{"data":{"products":[{"sku":"a","productName":"Shirt","tags":[]}],'
            '"totalCount":1}}'
        )
