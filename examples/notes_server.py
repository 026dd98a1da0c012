#!/usr/bin/env python3
"""MCP server using tools, prompts and resources together.

Run with `mcpkit run examples/notes_server.py --max-concurrency 4`.
"""

import asyncio

from pydantic import BaseModel, Field

from mcpkit import McpServer, ParameterDescriptor, ParamType, PromptMessage, Role, TextContent

NOTES: dict[str, str] = {"welcome": "Notes are kept in memory for the lifetime of the server."}


class AddNote(BaseModel):
    """Arguments of the add_note tool."""

    title: str = Field(..., description="Title of the note")
    body: str = Field(..., description="Note text")


def add_note(title: str, body: str) -> str:
    if title in NOTES:
        raise ValueError(f"note '{title}' already exists")
    NOTES[title] = body
    return f"Saved '{title}'"


async def search_notes(query: str, limit: int = 5) -> list:
    await asyncio.sleep(0)
    matches = [title for title, body in NOTES.items() if query.lower() in (title + body).lower()]
    return matches[:limit]


def summarize(title: str) -> list:
    note = NOTES.get(title, "")
    return [
        PromptMessage(role=Role.ASSISTANT, content=TextContent(text="I summarise notes in one sentence.")),
        f"Summarise this note:\n\n{note}",
    ]


def export_notes() -> bytes:
    return "\n".join(f"# {title}\n{body}\n" for title, body in NOTES.items()).encode("utf-8")


server = (
    McpServer("notes-server", "1.0.0")
    .tool("add_note", "Store a note", add_note, parameters=AddNote)
    .tool(
        "search_notes",
        "Find notes containing a phrase",
        search_notes,
        parameters=[
            ParameterDescriptor("query", ParamType.STRING, description="Phrase to look for"),
            ParameterDescriptor("limit", ParamType.INTEGER, required=False),
        ],
    )
    .prompt("summarize", "Summarise a stored note", summarize)
    .resource("notes://all", "All notes", "Every note as markdown", "text/markdown", export_notes)
    .resource("notes://count", "Note count", handler=lambda: str(len(NOTES)))
)


if __name__ == "__main__":
    server.run()
