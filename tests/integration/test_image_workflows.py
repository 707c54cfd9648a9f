"""Integration tests for the image tools against a mocked Gemini client."""

import asyncio
import base64

import pytest
from google.genai import errors as genai_errors

from mediamuse.gateway.model_gateway import ANALYZE_PROMPT
from mediamuse.models.status import RequestStatus
from mediamuse.services.image_analyzer import ImageAnalyzerController
from mediamuse.services.image_editor import ImageEditorController


@pytest.mark.integration
class TestImageWorkflows:

    def test_cyberpunk_edit(self, gateway, mock_genai_client, responses, jpeg_file, tmp_path):
        mock_genai_client.aio.models.generate_content.return_value = responses.image(b"edited-png")
        editor = ImageEditorController(gateway)
        seen = []
        editor.tracker.add_listener(lambda name, status: seen.append(status))

        editor.select_base(jpeg_file)
        editor.set_prompt("Cyberpunk style")
        status = asyncio.run(editor.generate())

        assert status is RequestStatus.SUCCESS
        assert seen == [RequestStatus.LOADING, RequestStatus.SUCCESS]
        mock_genai_client.aio.models.generate_content.assert_awaited_once()
        kwargs = mock_genai_client.aio.models.generate_content.await_args.kwargs
        parts = kwargs["contents"][0].parts
        assert [p.inline_data is not None for p in parts] == [True, False]
        assert parts[0].inline_data.data == jpeg_file.read_bytes()
        assert parts[1].text == "Cyberpunk style"
        assert list(kwargs["config"].response_modalities) == ["IMAGE"]

        assert editor.result.primary == base64.b64encode(b"edited-png").decode()
        saved = editor.save_result(tmp_path / "result.png")
        assert saved.read_bytes() == b"edited-png"

    def test_edit_without_image_output_is_error(self, gateway, mock_genai_client, responses, jpeg_file):
        mock_genai_client.aio.models.generate_content.return_value = responses.text("No can do")
        editor = ImageEditorController(gateway)
        editor.select_base(jpeg_file)
        editor.set_prompt("Remove background")

        assert asyncio.run(editor.generate()) is RequestStatus.ERROR
        assert editor.result is None

    def test_merge_sends_both_images_before_prompt(self, gateway, mock_genai_client, responses,
                                                   jpeg_file, png_file):
        mock_genai_client.aio.models.generate_content.return_value = responses.image(b"merged")
        editor = ImageEditorController(gateway)
        editor.select_base(jpeg_file)
        editor.select_merge(png_file)
        editor.set_prompt("Combine these images")

        asyncio.run(editor.generate())

        parts = mock_genai_client.aio.models.generate_content.await_args.kwargs["contents"][0].parts
        assert [p.inline_data.mime_type for p in parts[:2]] == ["image/jpeg", "image/png"]
        assert parts[2].text == "Combine these images"

    def test_analysis_text_is_kept_verbatim(self, gateway, mock_genai_client, responses, jpeg_file):
        report = "**Objects**: a lighthouse\n**Mood**: calm"
        mock_genai_client.aio.models.generate_content.return_value = responses.text(report)
        analyzer = ImageAnalyzerController(gateway)
        analyzer.select_image(jpeg_file)

        assert asyncio.run(analyzer.analyze()) is RequestStatus.SUCCESS
        assert analyzer.result.text == report
        parts = mock_genai_client.aio.models.generate_content.await_args.kwargs["contents"][0].parts
        assert parts[1].text == ANALYZE_PROMPT

    def test_malformed_response_lands_in_error_and_recovers(self, gateway, mock_genai_client,
                                                             responses, jpeg_file):
        generate = mock_genai_client.aio.models.generate_content
        generate.side_effect = genai_errors.UnknownApiResponseError("unexpected body")
        analyzer = ImageAnalyzerController(gateway)
        analyzer.select_image(jpeg_file)

        assert asyncio.run(analyzer.analyze()) is RequestStatus.ERROR
        assert analyzer.tracker.error_message is not None

        generate.side_effect = None
        generate.return_value = responses.text("A lighthouse at dusk.")
        assert asyncio.run(analyzer.analyze()) is RequestStatus.SUCCESS
        assert analyzer.result.text == "A lighthouse at dusk."
