"""Showcase examples for orthoplot."""

from orthoplot import Canvas, RoutingConfig, Shape, canvas, connect, shape


def hero_example():
    """Hero example: routing, port limits and jump-arcs in one canvas."""
    with canvas(filename="docs/hero"):
        request = shape(0, 0, 120, 60, label="Request")
        validate = shape(240, 0, 120, 60, label="Validate")
        store = shape(240, 200, 120, 60, label="Store")
        reject = shape(480, 0, 80, 80, label="Reject", kind="triangle")
        audit = shape(0, 200, 120, 60, label="Audit")

        request >> validate
        validate >> reject
        validate >> store
        # Later connections jump over the ones drawn before them
        audit >> validate
        request >> store


def example_port_limits():
    """A hub with more outgoing connections than free ports.

    Three sides take the outgoing traffic, the fourth stays free for the
    incoming connection.
    """
    with canvas(filename="docs/example_port_limits"):
        hub = shape(0, 0, label="Hub")
        targets = [
            shape(200, 0, label="East"),
            shape(0, 200, label="South"),
            shape(-200, 0, label="West"),
            shape(0, -200, label="North"),
        ]
        for target in targets:
            hub >> target

        source = shape(-200, -200, label="Source")
        connect(source, hub)


def example_grid():
    """A grid of shapes built with the Canvas API, with tight ports."""
    config = RoutingConfig(port_capacity=2, intersection_width=12)
    c = Canvas(config=config)

    cells = {}
    for row in range(3):
        for column in range(3):
            cells[row, column] = c.add_shape(
                Shape(column * 180, row * 160, 100, 60, label=f"{row}.{column}", config=config)
            )

    for row in range(3):
        for column in range(2):
            c.connect(cells[row, column], cells[row, column + 1])
    for column in range(3):
        c.connect(cells[0, column], cells[2, column])

    return c


if __name__ == "__main__":
    import os

    from orthoplot import render_to_svg

    os.makedirs("docs", exist_ok=True)

    print("Generating hero example...")
    hero_example()

    print("Generating port limits example...")
    example_port_limits()

    print("Generating grid example...")
    render_to_svg(example_grid(), "docs/example_grid")

    print("\nAll examples generated in docs/")
