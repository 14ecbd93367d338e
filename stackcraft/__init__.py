"""stack-craft -- interactive scaffolder for Node.js web API projects.

Asks for a project name, a framework (Express, Hono, Koa, Hapi, Fastify), a
language and a few extras, then copies a ready-to-run template into a new
directory and wires in Prisma, dependency installation and git on request.
"""

__version__ = "1.2.0"
