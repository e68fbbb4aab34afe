from env.board_parser import BoardDefinition

# Símbolos: # parede  . pastilha  o power  P jogador  H casa  - portão
#           T túnel  S speed pad  1-9 portal (pares pelo dígito)

CLASSIC = BoardDefinition(
    name="Classic",
    description="The arcade maze with a side tunnel.",
    ascii="""
############################
#............##............#
#.####.#####.##.#####.####.#
#o####.#####.##.#####.####o#
#.####.#####.##.#####.####.#
#.####.#####.##.#####.####.#
#..........................#
#.####.##.########.##.####.#
#.####.##.########.##.####.#
#......##....##....##......#
######.##### ## #####.######
######.##### ## #####.######
######.##          ##.######
######.## ###--### ##.######
######.## #HHHHHH# ##.######
TTTTTT.   #HHHHHH#   .TTTTTT
######.## #HHHHHH# ##.######
######.## ######## ##.######
######.##          ##.######
######.## ######## ##.######
#............##............#
#.####.#####.##.#####.####.#
#.####.#####.##.#####.####.#
#o..##.......P .......##..o#
###.##.##.########.##.##.###
###.##.##.########.##.##.###
#......##....##....##......#
#.##########.##.##########.#
#.##########.##.##########.#
#..........................#
############################
""",
)

WARP_GARDEN = BoardDefinition(
    name="Warp Garden",
    description="Classic layout with a speed strip and one portal pair.",
    ascii="""
############################
#............##............#
#.####.#####.##.#####.####.#
#o####.#####.##.#####.####o#
#.####.#####.##.#####.####.#
#.####.#####.##.#####.####.#
#.....SSSSSSSSSSSSSSSS.....#
#.####.##.########.##.####.#
#.####.##.########.##.####.#
#......##....##....##......#
######.##### ## #####.######
######.##### ## #####.######
######.##          ##.######
######.## ###--### ##.######
######.## #HHHHHH# ##.######
TTTTTT.   #HHHHHH#   .TTTTTT
######.## #HHHHHH# ##.######
######.## ######## ##.######
######.##          ##.######
######.## ######## ##.######
#1...........##............#
#.####.#####.##.#####.####.#
#.####.#####.##.#####.####.#
#o..##.......P .......##..o#
###.##.##.########.##.##.###
###.##.##.########.##.##.###
#......##....##....##......#
#.##########.##.##########.#
#.##########.##.##########.#
#.........................1#
############################
""",
)

BOARDS = [CLASSIC, WARP_GARDEN]
