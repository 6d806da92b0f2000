from manuscript_engine.markup import extract_blocks, looks_like_markup, markup_to_text


def test_markup_to_text_splits_block_elements():
    markup = (
        "<html><head><style>p { color: red; }</style></head>"
        "<body><h1>Title</h1><p>First <em>line</em> here.</p>"
        "<script>var x = 1;</script><div>Second block</div></body></html>"
    )

    text = markup_to_text(markup)

    assert text == "Title\n\nFirst line here.\n\nSecond block"


def test_extract_blocks_records_opening_tag_offsets():
    markup = "<p>Hello there</p>\n<div>Second</div>"

    blocks = extract_blocks(markup)

    assert [block.text for block in blocks] == ["Hello there", "Second"]
    assert blocks[0].position == 0
    assert blocks[1].position == markup.index("<div>")


def test_nested_blocks_are_sorted_by_position():
    markup = "<div>Outer <p>inner text</p> tail</div>"

    blocks = extract_blocks(markup)

    assert [block.position for block in blocks] == [0, markup.index("<p>")]
    assert blocks[0].text == "Outer inner text tail"
    assert blocks[1].text == "inner text"


def test_looks_like_markup():
    assert looks_like_markup("<p>hello</p>")
    assert not looks_like_markup("plain text only")
