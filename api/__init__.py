"""HTTP boundary serving the quiz engine to a browser renderer."""
