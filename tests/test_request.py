import json
import logging

import httpx
import pytest
from pydantic import BaseModel
from pytest_httpx import HTTPXMock

from composehttp import (
    EncodingError,
    Header,
    InvalidUrlStringError,
    Method,
    NoBodyError,
    Request,
    Response,
)


class Payload(BaseModel):
    x: int


class FailingEncoder:
    def encode(self, value):
        raise RuntimeError("nope")


class TestRequest:
    class TestCreation:
        def test_for_method(self, base_url: str):
            request = Request.for_method(Method.PATCH, httpx.URL(base_url))
            assert request.method == Method.PATCH
            assert request.url == base_url
            assert len(request.headers) == 0
            assert request.body is None

        def test_for_method_name(self, base_url: str):
            assert Request.for_method("options", base_url).method == Method.OPTIONS

        def test_unknown_method(self, base_url: str):
            with pytest.raises(ValueError):
                Request.for_method("FETCH", base_url)

        @pytest.mark.parametrize(
            "factory, method",
            [
                (Request.get, Method.GET),
                (Request.head, Method.HEAD),
                (Request.post, Method.POST),
                (Request.put, Method.PUT),
                (Request.patch, Method.PATCH),
                (Request.delete, Method.DELETE),
                (Request.options, Method.OPTIONS),
            ],
        )
        def test_string_constructors_use_their_method(self, factory, method, base_url):
            request = factory(f"{base_url}/items/1")
            assert request.method == method
            assert request.url == f"{base_url}/items/1"

        def test_url_value(self, base_url: str):
            url = httpx.URL(base_url)
            assert Request.get(url).url is url

        @pytest.mark.parametrize(
            "url", ["", "   ", "https://exa\nmple.com", "https://example.com:port/"]
        )
        def test_invalid_url_string(self, url: str):
            with pytest.raises(InvalidUrlStringError):
                Request.get(url)

    class TestHeaders:
        def test_set_header_returns_self(self, base_url: str):
            request = Request.get(base_url)
            assert request.set_header(Header.accept("text/html")) is request

        def test_last_write_wins(self, base_url: str):
            request = (
                Request.get(base_url)
                .set_header(Header.accept("text/html"))
                .set_header(Header.accept("application/json"))
            )

            assert request.headers.get_list("Accept") == ["application/json"]
            assert len(request.headers) == 1

        def test_field_match_is_case_insensitive(self, base_url: str):
            request = (
                Request.get(base_url)
                .set_header(Header.custom("x-token", "a"))
                .set_header(Header.custom("X-Token", "b"))
            )

            assert request.headers.get_list("X-TOKEN") == ["b"]

        def test_none_value_removes_field(self, base_url: str):
            request = (
                Request.get(base_url)
                .set_header(Header.cookie("a=1"))
                .set_header(Header.custom("Cookie", None))
            )

            assert "Cookie" not in request.headers

        def test_none_value_for_absent_field(self, base_url: str):
            request = Request.get(base_url).set_header(Header.custom("X-Gone", None))
            assert len(request.headers) == 0

        def test_set_headers_variadic_and_iterable(self, base_url: str):
            request = Request.get(base_url).set_headers(
                Header.accept("application/json"),
                [Header.authorization("Bearer t"), Header.accept("text/plain")],
            )

            assert request.headers["Accept"] == "text/plain"
            assert request.headers["Authorization"] == "Bearer t"

    class TestBody:
        def test_bytes(self, base_url: str):
            request = Request.post(base_url).set_body(b"\x00\x01")
            assert request.body == b"\x00\x01"

        def test_bytearray(self, base_url: str):
            assert Request.post(base_url).set_body(bytearray(b"ab")).body == b"ab"

        def test_string_matches_utf8_bytes(self, base_url: str):
            from_text = Request.post(base_url).set_body("abc")
            from_bytes = Request.post(base_url).set_body("abc".encode("utf-8"))
            assert from_text.body == from_bytes.body == b"abc"

        def test_structured_value_default_json(self, base_url: str):
            request = Request.post(base_url).set_body({"x": 1})
            assert request.body == b'{"x":1}'

        def test_pydantic_model(self, base_url: str):
            request = Request.post(base_url).set_body(Payload(x=2))
            assert json.loads(request.body or b"") == {"x": 2}

        def test_no_content_type_added(self, base_url: str):
            request = Request.post(base_url).set_body({"x": 1})
            assert "Content-Type" not in request.headers

        def test_custom_encoder(self, base_url: str):
            class UpperEncoder:
                def encode(self, value):
                    return str(value).upper().encode()

            request = Request.post(base_url).set_body(["a"], encoder=UpperEncoder())
            assert request.body == b"['A']"

        def test_encoder_failure(self, base_url: str):
            with pytest.raises(EncodingError) as exc_info:
                Request.post(base_url).set_body({"x": 1}, encoder=FailingEncoder())
            assert isinstance(exc_info.value.__cause__, RuntimeError)

        def test_unserializable_value(self, base_url: str):
            with pytest.raises(EncodingError):
                Request.post(base_url).set_body({"x": object()})

        def test_encoder_returning_text(self, base_url: str):
            class TextEncoder:
                def encode(self, value):
                    return "text"

            with pytest.raises(EncodingError):
                Request.post(base_url).set_body(1, encoder=TextEncoder())

    class TestSession:
        def test_rejects_non_session(self, base_url: str):
            with pytest.raises(TypeError):
                Request.get(base_url).set_session(object())  # type: ignore[arg-type]

        def test_injected_session(self, base_url: str, echo_session: httpx.Client):
            request = Request.put(f"{base_url}/items/1")
            assert request.set_session(echo_session) is request

            response = request.send()

            assert response.headers["X-Echo-Method"] == "PUT"
            assert response.headers["X-Echo-Url"] == f"{base_url}/items/1"

    class TestSend:
        def test_simple_request(self, httpx_mock: HTTPXMock, base_url: str):
            httpx_mock.add_response(
                url=f"{base_url}/endpoint",
                status_code=200,
                json={"test": "test"},
            )

            response = (
                Request.get(f"{base_url}/endpoint")
                .set_headers(Header.accept("application/json"))
                .send()
            )

            sent_request = httpx_mock.get_request()
            if sent_request is None:
                raise Exception("No request was sent")

            assert sent_request.method == "GET"
            assert sent_request.url == f"{base_url}/endpoint"
            assert sent_request.headers["Accept"] == "application/json"
            assert sent_request.headers["User-Agent"].startswith("composehttp/")

            assert isinstance(response, Response)
            assert response.status_code == 200
            assert response.body() == {"test": "test"}

        def test_user_agent_override(self, httpx_mock: HTTPXMock, base_url: str):
            httpx_mock.add_response(url=base_url)

            Request.get(base_url).set_header(Header.user_agent("tests/1.0")).send()

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers.get_list("User-Agent") == ["tests/1.0"]

        def test_body_is_sent(self, httpx_mock: HTTPXMock, base_url: str):
            httpx_mock.add_response(url=base_url, method="POST", status_code=204)

            response = Request.post(base_url).set_body("hello").send()

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.content == b"hello"
            assert response.status_code == 204

        def test_each_send_is_a_new_exchange(
            self, httpx_mock: HTTPXMock, base_url: str
        ):
            httpx_mock.add_response(url=base_url, text="first")
            httpx_mock.add_response(url=base_url, text="second")
            request = Request.get(base_url)

            assert request.send().body_text() == "first"
            assert request.send().body_text() == "second"
            assert len(httpx_mock.get_requests()) == 2

        def test_transport_error_passes_through(
            self, httpx_mock: HTTPXMock, base_url: str
        ):
            httpx_mock.add_exception(httpx.ConnectError("refused"), url=base_url)

            with pytest.raises(httpx.ConnectError):
                Request.get(base_url).send()

        def test_logs_request_and_response(
            self,
            base_url: str,
            echo_session: httpx.Client,
            caplog: pytest.LogCaptureFixture,
        ):
            with caplog.at_level(logging.DEBUG, logger="composehttp"):
                Request.delete(f"{base_url}/items/1").set_session(echo_session).send()

            messages = [record.getMessage() for record in caplog.records]
            assert f"Request: DELETE {base_url}/items/1" in messages
            assert "Response: 201" in messages

        def test_logs_credentials_redacted(
            self,
            base_url: str,
            echo_session: httpx.Client,
            caplog: pytest.LogCaptureFixture,
        ):
            with caplog.at_level(logging.DEBUG, logger="composehttp"):
                Request.get(base_url).set_headers(
                    Header.authorization("Bearer secret-token"),
                    Header.cookie("session=abc123"),
                    Header.accept("application/json"),
                ).set_session(echo_session).send()

            text = caplog.text
            assert "secret-token" not in text
            assert "abc123" not in text
            assert "[REDACTED]" in text
            assert "application/json" in text

        def test_json_round_trip(self, base_url: str, echo_session: httpx.Client):
            value = {"name": "widget", "tags": ["a", "b"], "count": 3, "ok": True}

            response = (
                Request.post(base_url)
                .set_body(value)
                .set_session(echo_session)
                .send()
            )

            assert response.body() == value

        def test_create_scenario(self, base_url: str, echo_session: httpx.Client):
            response = (
                Request.post(f"{base_url}/items")
                .set_headers(Header.content_type("application/json"))
                .set_body({"x": 1})
                .set_session(echo_session)
                .send()
            )

            sent_headers = json.loads(response.headers["X-Echo-Headers"])
            assert sent_headers["content-type"] == "application/json"
            assert response.verify_status_code(is_=201) is response
            assert response.body() == {"x": 1}
            assert response.body(as_=Payload) == Payload(x=1)

    class TestSendAsync:
        @pytest.mark.anyio
        async def test_simple_request_async(
            self, httpx_mock: HTTPXMock, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}/endpoint",
                status_code=200,
                json={"test": "test"},
            )

            response = await Request.get(f"{base_url}/endpoint").send_async()

            sent_request = httpx_mock.get_request()
            if sent_request is None:
                raise Exception("No request was sent")

            assert sent_request.method == "GET"
            assert response.status_code == 200
            assert response.body() == {"test": "test"}

        @pytest.mark.anyio
        async def test_injected_async_session(
            self, base_url: str, echo_session_async: httpx.AsyncClient
        ):
            async with echo_session_async:
                response = (
                    await Request.delete(f"{base_url}/items/1")
                    .set_session(echo_session_async)
                    .send_async()
                )

            assert response.status_code == 201
            assert response.headers["X-Echo-Method"] == "DELETE"

        @pytest.mark.anyio
        async def test_sync_session_not_used_for_async(
            self,
            httpx_mock: HTTPXMock,
            base_url: str,
            echo_session: httpx.Client,
        ):
            httpx_mock.add_response(url=base_url, status_code=200)

            response = (
                await Request.get(base_url).set_session(echo_session).send_async()
            )

            assert response.status_code == 200

    class TestSendBody:
        def test_send_body(self, base_url: str, echo_session: httpx.Client):
            body = (
                Request.post(base_url)
                .set_body({"x": 5})
                .set_session(echo_session)
                .send_body(as_=Payload)
            )
            assert body == Payload(x=5)

        def test_send_body_decode_error(
            self, httpx_mock: HTTPXMock, base_url: str
        ):
            httpx_mock.add_response(url=base_url, text="not json")

            with pytest.raises(json.JSONDecodeError):
                Request.get(base_url).send_body()

        @pytest.mark.anyio
        async def test_send_body_async(
            self, base_url: str, echo_session_async: httpx.AsyncClient
        ):
            async with echo_session_async:
                body = (
                    await Request.post(base_url)
                    .set_body([1, 2, 3])
                    .set_session(echo_session_async)
                    .send_body_async()
                )
            assert body == [1, 2, 3]

    class TestSendStream:
        def test_stream_chunks(self, httpx_mock: HTTPXMock, base_url: str):
            httpx_mock.add_response(url=base_url, content=b"abcdef")

            stream = Request.get(base_url).send_stream(chunk_size=2)

            assert stream.response.status_code == 200
            assert list(stream) == [b"ab", b"cd", b"ef"]

        def test_stream_is_single_pass(self, httpx_mock: HTTPXMock, base_url: str):
            httpx_mock.add_response(url=base_url, content=b"abc")

            stream = Request.get(base_url).send_stream()

            assert b"".join(stream) == b"abc"
            with pytest.raises(httpx.StreamConsumed):
                list(stream)

        def test_stream_metadata_has_no_body(
            self, httpx_mock: HTTPXMock, base_url: str
        ):
            httpx_mock.add_response(url=base_url, content=b"abc")

            with Request.get(base_url).send_stream() as stream:
                assert stream.response.headers["Content-Length"] == "3"
                with pytest.raises(NoBodyError):
                    stream.response.body_bytes()

        def test_closed_stream_cannot_be_iterated(
            self, base_url: str, echo_session: httpx.Client
        ):
            stream = (
                Request.post(base_url)
                .set_body(b"xyz")
                .set_session(echo_session)
                .send_stream()
            )
            stream.close()

            with pytest.raises(httpx.StreamConsumed):
                list(stream)

        @pytest.mark.anyio
        async def test_stream_async(self, httpx_mock: HTTPXMock, base_url: str):
            httpx_mock.add_response(url=base_url, content=b"abcdef")

            stream = await Request.get(base_url).send_stream_async(chunk_size=3)
            chunks = [chunk async for chunk in stream]

            assert stream.response.status_code == 200
            assert chunks == [b"abc", b"def"]
            with pytest.raises(httpx.StreamConsumed):
                async for _ in stream:
                    pass

        @pytest.mark.anyio
        async def test_stream_async_context_manager(
            self, base_url: str, echo_session_async: httpx.AsyncClient
        ):
            async with echo_session_async:
                stream = (
                    await Request.post(base_url)
                    .set_body(b"xyz")
                    .set_session(echo_session_async)
                    .send_stream_async()
                )
                async with stream:
                    assert b"".join([c async for c in stream]) == b"xyz"
