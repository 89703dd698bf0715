# Loopback call/reply example over an in-memory transport.

import asyncio

import thriftjson
from thriftjson import Message, MessageType, Struct, TType, logs


async def serve(protocol: thriftjson.Protocol) -> None:
    msg = await protocol.read_message()
    field = msg.struct_value.get_field(1, TType.STRING)
    if field is None:
        error = thriftjson.ApplicationError(
            thriftjson.ApplicationErrorKind.MISSING_RESULT, 'nothing to echo'
        )
        reply = Message(msg.name, MessageType.EXCEPTION, msg.seqid, error.to_struct())
    else:
        reply = Message(msg.name, MessageType.REPLY, msg.seqid, Struct({0: field}))
    await protocol.write_message(reply)


async def main() -> None:
    client, server = thriftjson.pipe()
    task = asyncio.create_task(serve(thriftjson.create_protocol('json', server)))

    protocol = thriftjson.create_protocol('json', client)
    args = Struct({1: thriftjson.new_string('ping').as_field()})
    await protocol.write_message(Message('echo', MessageType.CALL, 1, args))

    reply = await protocol.read_message()
    await task
    print(f'{reply.struct_value.get_field(0, TType.STRING).string_value=}')


if __name__ == '__main__':
    logs.init(debug_level=2)
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
