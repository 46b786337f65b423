"""Text recognition for image entries.

The manager depends only on ``TextRecognizer``; ``VisionRecognizer`` is the
macOS implementation through PyObjC's Vision bindings.
"""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class OCRResult:
    text: str
    success: bool
    error: Optional[str] = None


class TextRecognizer(Protocol):
    def recognize(self, image_data: bytes) -> OCRResult: ...


class VisionRecognizer:
    def __init__(self, languages: list[str] | None = None, accurate: bool = True):
        self._languages = languages
        self._accurate = accurate

    def recognize(self, image_data: bytes) -> OCRResult:
        try:
            import Vision
            from Foundation import NSData
        except ImportError as e:
            return OCRResult(text="", success=False, error=f"Vision not available: {e}")

        try:
            ns_data = NSData.dataWithBytes_length_(image_data, len(image_data))
            handler = Vision.VNImageRequestHandler.alloc().initWithData_options_(ns_data, None)
            request = Vision.VNRecognizeTextRequest.alloc().init()
            if self._accurate:
                request.setRecognitionLevel_(Vision.VNRequestTextRecognitionLevelAccurate)
            else:
                request.setRecognitionLevel_(Vision.VNRequestTextRecognitionLevelFast)
            request.setUsesLanguageCorrection_(True)
            if self._languages:
                request.setRecognitionLanguages_(self._languages)

            success, error = handler.performRequests_error_([request], None)
            if not success:
                return OCRResult(text="", success=False, error=str(error))

            lines = []
            for observation in request.results() or []:
                candidates = observation.topCandidates_(1)
                if candidates:
                    lines.append(str(candidates[0].string()))

            text = "\n".join(lines).strip()
            if not text:
                return OCRResult(text="", success=False, error="No text detected in image")
            return OCRResult(text=text, success=True)
        except Exception as e:
            return OCRResult(text="", success=False, error=str(e))
