"""Models, configuration and state shared by the library, storage and API layers."""
