from core.buffers.text_files import TextBuffers, TextFileBuffers

__all__: list[str] = ["TextBuffers", "TextFileBuffers"]
