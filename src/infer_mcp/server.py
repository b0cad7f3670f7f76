from mcp.server.fastmcp import FastMCP

# All tools we want to expose via the MCP server
from infer_mcp.infrastructure.resources import get_all_resources_tools
from infer_mcp.tools.core import get_all_dataset_tools
from infer_mcp.tools.inference import get_all_hypothesis_test_tools

# create an MCP server
mcp = FastMCP("infer-mcp")

# Add resource and manifest tools
for tool_func in get_all_resources_tools():
    mcp.add_tool(tool_func)

# Add dataset management tools
for tool_func in get_all_dataset_tools():
    mcp.add_tool(tool_func)

# Add hypothesis test tools
for tool_func in get_all_hypothesis_test_tools():
    mcp.add_tool(tool_func)


def main():
    mcp.run()


if __name__ == "__main__":
    main()
