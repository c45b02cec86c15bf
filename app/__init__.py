"""
Game catalog application package.

Layered architecture:

  app/models.py       — ``GameRecord`` and the response envelope.
  app/config.py       — config file / environment loading and logging setup.
  app/repositories/   — pure I/O: the read-only catalog data source.
  app/services/       — business logic: the name search and health status.

``catalog_server.py`` is the HTTP layer over ``CatalogService``;
``catalog_client.py`` consumes that HTTP API and drives the terminal view.
"""
