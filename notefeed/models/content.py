"""
Content models for notefeed.

This module defines the render-agnostic block and rich-text structures that
every source block is normalized into. The block set is closed: anything the
parser cannot map to one of these variants is dropped before it gets here.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    TypeAdapter,
    model_serializer,
)


class RichTextAnnotations(BaseModel):
    """
    The fixed set of inline style flags carried by every rich-text span.
    """

    model_config = ConfigDict(frozen=True)

    bold: bool = Field(default=False, description="Bold text")
    italic: bool = Field(default=False, description="Italic text")
    code: bool = Field(default=False, description="Inline code")
    strikethrough: bool = Field(default=False, description="Struck-through text")
    underline: bool = Field(default=False, description="Underlined text")


class RichText(BaseModel):
    """
    One contiguous run of inline text with uniform formatting.

    ``link`` is only present when the source span is hyperlinked. An unlinked
    span holds None and omits the key entirely when serialized, which keeps it
    distinct from a span whose link is the empty string.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(
        default="",
        description="Plain text content of the span"
    )

    annotations: RichTextAnnotations = Field(
        default_factory=RichTextAnnotations,
        description="Style flags, always fully populated"
    )

    link: Optional[str] = Field(
        default=None,
        description="Hyperlink target, only present when the span is linked"
    )

    @property
    def has_link(self) -> bool:
        return self.link is not None

    @model_serializer(mode="wrap")
    def _omit_absent_link(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        data = handler(self)
        if self.link is None:
            data.pop("link", None)
        return data


class ParagraphBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["paragraph"] = "paragraph"
    children: List[RichText] = Field(default_factory=list)


class HeadingBlock(BaseModel):
    """A heading; the three source heading types collapse into this one shape."""

    model_config = ConfigDict(frozen=True)

    type: Literal["heading"] = "heading"
    level: Literal[1, 2, 3] = Field(..., description="Heading level, 1 is the largest")
    children: List[RichText] = Field(default_factory=list)


class CodeBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["code"] = "code"
    language: str = Field(..., description="Language name as declared by the source")
    content: str = Field(
        default="",
        description="Concatenated plain text of every span, annotations discarded"
    )


class ImageBlock(BaseModel):
    """
    An image resolved from either an externally hosted URL or a hosted file.

    ``url`` is None only when the source carried neither shape and the parser
    runs with the lenient image policy.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    url: Optional[str] = Field(default=None, description="Resolved image URL")
    caption: Optional[str] = Field(
        default=None,
        description="Plain text of the first caption span, if any"
    )


class QuoteBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["quote"] = "quote"
    children: List[RichText] = Field(default_factory=list)


class BulletedListItemBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["bulleted_list_item"] = "bulleted_list_item"
    children: List[RichText] = Field(default_factory=list)


class NumberedListItemBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["numbered_list_item"] = "numbered_list_item"
    children: List[RichText] = Field(default_factory=list)


Block = Annotated[
    Union[
        ParagraphBlock,
        HeadingBlock,
        CodeBlock,
        ImageBlock,
        QuoteBlock,
        BulletedListItemBlock,
        NumberedListItemBlock,
    ],
    Field(discriminator="type"),
]

# Validates serialized block lists (e.g. cached JSON) back into block variants
BLOCK_LIST_ADAPTER = TypeAdapter(List[Block])
