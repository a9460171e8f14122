"""Tests for base room generation (pixelroom/services/base_room.py).

Image calls are mocked; reference downloads go through httpx.MockTransport.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from pixelroom.errors import PipelineError
from pixelroom.services.base_room import combine_prompt, generate_base_room, with_palette
from tests.imaging import png_bytes

_EDIT = "pixelroom.services.base_room.edit_image"
_GENERATE = "pixelroom.services.base_room.generate_image"

REF_A = "https://cdn.example.com/a.png"
REF_B = "https://cdn.example.com/b.jpg"
REF_MISSING = "https://cdn.example.com/missing.png"


def _image_client(missing: set[str] = frozenset()) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url in missing:
            return httpx.Response(404)
        content_type = "image/png" if url.endswith(".png") else "image/jpeg"
        return httpx.Response(200, content=url.encode(), headers={"content-type": content_type})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestPromptHelpers:
    def test_negative_prompt_appended(self):
        assert combine_prompt("cozy room", "clutter") == "cozy room\nAvoid: clutter"

    def test_empty_negative_prompt_ignored(self):
        assert combine_prompt("cozy room", "") == "cozy room"
        assert combine_prompt("cozy room") == "cozy room"

    def test_palette_hint(self):
        assert with_palette("cozy room", "sage, cream") == "cozy room (palette: sage, cream)"
        assert with_palette("cozy room", None) == "cozy room"


class TestGenerateBaseRoom:
    @pytest.mark.asyncio
    async def test_no_references_uses_generate(self):
        png = png_bytes(64, 64, (1, 2, 3, 255))
        with (
            patch(_EDIT, new_callable=AsyncMock) as mock_edit,
            patch(_GENERATE, new_callable=AsyncMock, return_value=png) as mock_gen,
        ):
            result = await generate_base_room("cozy room", negative_prompt="clutter")
        mock_edit.assert_not_called()
        mock_gen.assert_awaited_once()
        assert mock_gen.call_args.args[0] == "cozy room\nAvoid: clutter"
        assert mock_gen.call_args.kwargs["size"] == "1024x1024"
        assert result.data == png
        assert result.size == (64, 64)

    @pytest.mark.asyncio
    async def test_failed_reference_skipped(self):
        async with _image_client(missing={REF_MISSING}) as client:
            with (
                patch(_EDIT, new_callable=AsyncMock, return_value=b"edited") as mock_edit,
                patch(_GENERATE, new_callable=AsyncMock) as mock_gen,
            ):
                result = await generate_base_room(
                    "cozy room",
                    reference_urls=[REF_A, REF_MISSING, REF_B],
                    http_client=client,
                )
        mock_gen.assert_not_called()
        images = mock_edit.call_args.args[0]
        assert [img.url for img in images] == [REF_A, REF_B]
        assert [img.extension for img in images] == ["png", "jpg"]
        assert result.data == b"edited"

    @pytest.mark.asyncio
    async def test_generic_content_type_reference_still_used(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"ref", headers={"content-type": "binary/octet-stream"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with (
                patch(_EDIT, new_callable=AsyncMock, return_value=b"edited") as mock_edit,
                patch(_GENERATE, new_callable=AsyncMock) as mock_gen,
            ):
                result = await generate_base_room(
                    "room", reference_urls=["https://bucket.example.com/ref"], http_client=client
                )
        mock_gen.assert_not_called()
        [image] = mock_edit.call_args.args[0]
        assert image.data == b"ref"
        assert image.content_type == "image/jpeg"
        assert result.data == b"edited"

    @pytest.mark.asyncio
    async def test_references_capped(self):
        urls = [f"https://cdn.example.com/{i}.png" for i in range(9)]
        async with _image_client() as client:
            with patch(_EDIT, new_callable=AsyncMock, return_value=b"edited") as mock_edit:
                await generate_base_room("room", reference_urls=urls, http_client=client)
        assert len(mock_edit.call_args.args[0]) == 6

    @pytest.mark.asyncio
    async def test_all_references_failed_falls_back_to_generate(self):
        async with _image_client(missing={REF_A, REF_B}) as client:
            with (
                patch(_EDIT, new_callable=AsyncMock) as mock_edit,
                patch(_GENERATE, new_callable=AsyncMock, return_value=b"generated") as mock_gen,
            ):
                result = await generate_base_room(
                    "room", reference_urls=[REF_A, REF_B], http_client=client
                )
        mock_edit.assert_not_called()
        mock_gen.assert_awaited_once()
        assert result.data == b"generated"

    @pytest.mark.asyncio
    async def test_edit_exception_falls_back_to_generate(self):
        async with _image_client() as client:
            with (
                patch(_EDIT, new_callable=AsyncMock, side_effect=RuntimeError("edit unavailable")),
                patch(_GENERATE, new_callable=AsyncMock, return_value=b"generated") as mock_gen,
            ):
                result = await generate_base_room("room", reference_urls=[REF_A], http_client=client)
        mock_gen.assert_awaited_once()
        assert result.data == b"generated"

    @pytest.mark.asyncio
    async def test_edit_without_image_is_hard_failure(self):
        async with _image_client() as client:
            with (
                patch(_EDIT, new_callable=AsyncMock, return_value=None),
                patch(_GENERATE, new_callable=AsyncMock) as mock_gen,
            ):
                with pytest.raises(PipelineError) as exc_info:
                    await generate_base_room("room", reference_urls=[REF_A], http_client=client)
        mock_gen.assert_not_called()
        assert exc_info.value.code == "no_base_image"
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_generate_without_image_uses_given_code(self):
        with patch(_GENERATE, new_callable=AsyncMock, return_value=None):
            with pytest.raises(PipelineError) as exc_info:
                await generate_base_room("room", missing_image_code="no_image")
        assert exc_info.value.code == "no_image"

    @pytest.mark.asyncio
    async def test_generate_errors_propagate(self):
        with patch(_GENERATE, new_callable=AsyncMock, side_effect=RuntimeError("quota")):
            with pytest.raises(RuntimeError, match="quota"):
                await generate_base_room("room")

    @pytest.mark.asyncio
    async def test_model_prefix_stripped(self):
        with patch(_GENERATE, new_callable=AsyncMock, return_value=b"x") as mock_gen:
            await generate_base_room("room", model="openai:gpt-image-1")
        assert mock_gen.call_args.kwargs["model"] == "gpt-image-1"
